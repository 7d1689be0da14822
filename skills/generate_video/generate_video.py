"""
Video Generation Skill - Veo image-to-video.

Animates a single photo with subtle motion. Veo does not answer directly:
generate_videos returns an operation that is polled until done, and the
finished clip sits behind a time-limited link that has to be downloaded
and re-encoded before anyone else sees it.
"""

import logging
from dataclasses import dataclass

from config import GenerationSettings
from agent.errors import MissingOutputError, ValidationError
from agent.gemini_client import GeminiClient
from agent.prompts import Prompts
from models.media import PhotoAsset, encode_data_uri
from models.operation import Operation
from models.prompt import BuiltPrompt, PromptPart
from models.requests import GenerateVideoInput

from .operation_poller import OperationPoller

logger = logging.getLogger(__name__)

VIDEO_MIME_TYPE = "video/mp4"


@dataclass
class VideoClipResult:
    """Result of animating a photo."""
    video_data_uri: str
    duration_seconds: int
    operation_name: str = None


class VideoGenerator:
    """
    Generate a short animated clip using Veo.

    Key capability: image-to-video with the photo as the starting frame.
    """

    def __init__(
        self,
        client: GeminiClient,
        settings: GenerationSettings,
        poller: OperationPoller = None,
    ):
        self.client = client
        self.settings = settings
        self.poller = poller or OperationPoller.from_settings(client, settings)

    def build_prompt(self, request: GenerateVideoInput) -> BuiltPrompt:
        if not request.photo_data_uri:
            raise ValidationError("Photo data is missing.")

        photo = PhotoAsset.from_data_uri(request.photo_data_uri)
        return BuiltPrompt(
            parts=[PromptPart.from_text(Prompts.ANIMATE_PHOTO), PromptPart.from_media(photo)],
            model=self.settings.video_model,
            options={
                "duration_seconds": self.settings.video_duration_seconds,
                "aspect_ratio": self.settings.video_aspect_ratio,
                "person_generation": self.settings.video_person_generation,
            },
        )

    async def _download(self, operation: Operation) -> tuple[bytes, str]:
        if not operation.has_media:
            raise MissingOutputError("Failed to find the generated video in the response.")

        if operation.media_data:
            return operation.media_data, operation.media_mime_type

        logger.info("[Video] Downloading generated clip")
        data = await self.client.fetch_media(operation.media_url)
        return data, operation.media_mime_type

    async def generate(self, request: GenerateVideoInput) -> VideoClipResult:
        prompt = self.build_prompt(request)
        logger.info(
            f"[Video] Starting Veo operation "
            f"({prompt.options['duration_seconds']}s, {prompt.options['aspect_ratio']})"
        )

        operation = await self.client.start_operation(
            prompt.text,
            prompt.media[0],
            model=prompt.model,
            **prompt.options,
        )
        operation = await self.poller.wait(operation)
        logger.info(f"[Video] Operation {operation.name} complete")

        data, mime_type = await self._download(operation)
        if not mime_type.startswith("video/"):
            mime_type = VIDEO_MIME_TYPE

        logger.info(f"[Video] Clip ready ({len(data)} bytes)")
        return VideoClipResult(
            video_data_uri=encode_data_uri(data, mime_type),
            duration_seconds=prompt.options["duration_seconds"],
            operation_name=operation.name,
        )
