"""
Gemini client - the one place that talks to google-genai.

Skills hand over prompt parts and get back parsed text, media bytes or an
Operation. SDK calls are blocking, so each one runs in a worker thread.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from google.genai import types
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from config import GenerationSettings, get_gemini_client
from agent.errors import (
    MissingOutputError,
    ProtocolViolation,
    SafetyRejection,
)
from models.media import PhotoAsset
from models.operation import Operation
from models.prompt import PromptPart

logger = logging.getLogger(__name__)

NO_TEXT_OUTPUT_MESSAGE = (
    "The AI model failed to produce a valid output. "
    "This may be due to a safety policy violation or a temporary issue."
)

NO_MEDIA_MESSAGES = {
    "IMAGE": "No image was generated.",
    "AUDIO": "No audio media was generated.",
}


@dataclass
class MediaPayload:
    """Inline media returned by a generate call."""
    data: bytes
    mime_type: str


class GeminiClient:
    """
    Thin async adapter over google-genai.

    The SDK client is created on first use, so a server without a key still
    starts; the first call then fails as a misconfiguration.
    """

    def __init__(self, settings: GenerationSettings, sdk_client=None):
        self.settings = settings
        self._sdk_client = sdk_client

    @property
    def sdk(self):
        if self._sdk_client is None:
            self._sdk_client = get_gemini_client(self.settings)
        return self._sdk_client

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _to_contents(parts: list[PromptPart]) -> list:
        contents = []
        for part in parts:
            if part.is_media:
                contents.append(
                    types.Part.from_bytes(data=part.media.data, mime_type=part.media.mime_type)
                )
            else:
                contents.append(part.text)
        return contents

    @staticmethod
    def _check_blocked(response) -> None:
        """Raise SafetyRejection if the prompt or the only candidate was blocked."""
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None) if feedback else None
        if block_reason:
            raise SafetyRejection(f"Prompt blocked by safety policy: {block_reason}")

        candidates = getattr(response, "candidates", None) or []
        if len(candidates) == 1:
            finish_reason = str(getattr(candidates[0], "finish_reason", "") or "")
            if finish_reason.endswith("SAFETY") or finish_reason.endswith("PROHIBITED_CONTENT"):
                raise SafetyRejection(f"Response blocked by safety policy: {finish_reason}")

    def _resolve_model(self, explicit: Optional[str], configured: Optional[str]) -> str:
        """Explicit model, else the per-kind setting, else the process default."""
        return explicit or configured or self.settings.default_model

    @staticmethod
    def _inline_parts(response):
        candidates = getattr(response, "candidates", None) or []
        if not candidates or not candidates[0].content:
            return
        for part in candidates[0].content.parts or []:
            if getattr(part, "inline_data", None) is not None and part.inline_data.data:
                yield part.inline_data

    # =========================================================================
    # Generate-and-return
    # =========================================================================

    async def generate_text(
        self,
        parts: list[PromptPart],
        output_schema: type[BaseModel],
        model: str = None,
    ) -> BaseModel:
        """Generate structured text and parse it into ``output_schema``."""
        model = self._resolve_model(model, self.settings.text_model)

        def call_gemini():
            return self.sdk.models.generate_content(
                model=model,
                contents=self._to_contents(parts),
                config=types.GenerateContentConfig(
                    temperature=self.settings.temperature,
                    response_mime_type="application/json",
                    response_schema=output_schema,
                ),
            )

        response = await asyncio.to_thread(call_gemini)
        self._check_blocked(response)

        parsed = getattr(response, "parsed", None)
        if isinstance(parsed, output_schema):
            return parsed

        text = getattr(response, "text", None)
        if not text:
            raise MissingOutputError(NO_TEXT_OUTPUT_MESSAGE)
        try:
            return output_schema.model_validate_json(text)
        except SchemaError as e:
            logger.error(f"[Gemini] Unparseable {output_schema.__name__}: {e}")
            logger.error(f"[Gemini] Raw response: {text[:500]}")
            raise MissingOutputError(NO_TEXT_OUTPUT_MESSAGE) from e

    async def generate_media(
        self,
        parts: list[PromptPart],
        modalities: list[str],
        model: str = None,
        voice_name: str = None,
    ) -> MediaPayload:
        """Generate an image or audio clip and return the first inline payload."""
        if "AUDIO" in modalities:
            model = self._resolve_model(model, self.settings.tts_model)
        else:
            model = self._resolve_model(model, self.settings.image_model)

        config_kwargs = {"response_modalities": list(modalities)}
        if voice_name:
            config_kwargs["speech_config"] = types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_name)
                )
            )

        def call_gemini():
            return self.sdk.models.generate_content(
                model=model,
                contents=self._to_contents(parts),
                config=types.GenerateContentConfig(**config_kwargs),
            )

        response = await asyncio.to_thread(call_gemini)
        self._check_blocked(response)

        for inline in self._inline_parts(response):
            mime_type = inline.mime_type or ("audio/L16" if "AUDIO" in modalities else "image/png")
            return MediaPayload(data=inline.data, mime_type=mime_type)

        kind = "AUDIO" if "AUDIO" in modalities else "IMAGE"
        raise MissingOutputError(NO_MEDIA_MESSAGES[kind])

    # =========================================================================
    # Long-running operations
    # =========================================================================

    async def start_operation(
        self,
        prompt: str,
        image: PhotoAsset,
        model: str = None,
        duration_seconds: int = None,
        aspect_ratio: str = None,
        person_generation: str = None,
    ) -> Optional[Operation]:
        """Submit a Veo request. Returns None if no operation came back."""
        model = model or self.settings.video_model

        def start_veo_operation():
            return self.sdk.models.generate_videos(
                model=model,
                prompt=prompt,
                image=types.Image(image_bytes=image.data, mime_type=image.mime_type),
                config=types.GenerateVideosConfig(
                    number_of_videos=1,
                    duration_seconds=duration_seconds or self.settings.video_duration_seconds,
                    aspect_ratio=aspect_ratio or self.settings.video_aspect_ratio,
                    person_generation=person_generation or self.settings.video_person_generation,
                ),
            )

        raw = await asyncio.to_thread(start_veo_operation)
        if raw is None:
            return None
        return Operation.from_sdk(raw)

    async def poll_operation(self, operation: Operation) -> Operation:
        """Re-read an operation's status."""
        raw = await asyncio.to_thread(self.sdk.operations.get, operation.handle)
        return Operation.from_sdk(raw)

    async def fetch_media(self, url: str) -> bytes:
        """Download a time-limited media link."""

        def download():
            response = requests.get(
                url,
                headers={"x-goog-api-key": self.settings.api_key or ""},
                timeout=self.settings.media_download_timeout_seconds,
            )
            response.raise_for_status()
            return response.content

        try:
            return await asyncio.to_thread(download)
        except requests.RequestException as e:
            raise ProtocolViolation(f"Failed to download video: {e}") from e
