"""
Image Generation Skill - synthesis from references, or artwork from a poem.

Both modes ask the image model for a single IMAGE response and hand the
inline result back as a PhotoAsset, ready to be re-encoded as a data URI
or fed into the poem skill.
"""

import logging
from typing import Optional

from config import ASPECT_RATIOS, GenerationSettings
from agent.errors import ValidationError
from agent.gemini_client import GeminiClient
from agent.prompts import Prompts
from models.media import PhotoAsset
from models.prompt import BuiltPrompt, PromptPart
from models.requests import GenerateImageInput
from skills.understand_image import ImageUnderstanding

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Required image data or prompt is missing."


def is_synthesis_request(request: GenerateImageInput) -> bool:
    return bool(request.prompt and request.photo_data_uris)


def is_artwork_request(request: GenerateImageInput) -> bool:
    return bool(request.poem and request.photo_data_uri)


class ImageGenerator:
    """Generate images with the Gemini image model."""

    def __init__(
        self,
        client: GeminiClient,
        settings: GenerationSettings,
        style_analyzer: ImageUnderstanding = None,
    ):
        self.client = client
        self.settings = settings
        self.style_analyzer = style_analyzer or ImageUnderstanding(client, settings)

    def _aspect_ratio(self, request: GenerateImageInput) -> str:
        aspect_ratio = request.aspect_ratio or self.settings.default_aspect_ratio
        if aspect_ratio not in ASPECT_RATIOS:
            raise ValidationError(
                f"Unsupported aspect ratio '{aspect_ratio}'. Choose one of: {', '.join(ASPECT_RATIOS)}"
            )
        return aspect_ratio

    def build_prompt(
        self,
        request: GenerateImageInput,
        style_instructions: Optional[str] = None,
    ) -> BuiltPrompt:
        """
        Assemble the image prompt for whichever mode the request satisfies.

        Synthesis wins when both are present.
        """
        if is_synthesis_request(request):
            if len(request.photo_data_uris) > self.settings.max_photos:
                raise ValidationError(
                    f"You can combine at most {self.settings.max_photos} photos."
                )
            aspect_ratio = self._aspect_ratio(request)
            photos = [PhotoAsset.from_data_uri(uri) for uri in request.photo_data_uris]
            parts = [
                PromptPart.from_text(
                    Prompts.SYNTHESIZE_IMAGE.format(aspect_ratio=aspect_ratio, prompt=request.prompt)
                )
            ]
            parts.extend(PromptPart.from_media(photo) for photo in photos)

        elif is_artwork_request(request):
            aspect_ratio = self._aspect_ratio(request)
            photo = PhotoAsset.from_data_uri(request.photo_data_uri)
            style = f" Render it in this style: {style_instructions}" if style_instructions else ""
            parts = [
                PromptPart.from_text(
                    Prompts.POEM_ARTWORK.format(aspect_ratio=aspect_ratio, style_instructions=style)
                ),
                PromptPart.from_media(photo),
                PromptPart.from_text(Prompts.POEM_FOR_INSPIRATION.format(poem=request.poem)),
            ]

        else:
            raise ValidationError(MISSING_INPUT_MESSAGE)

        return BuiltPrompt(
            parts=parts,
            model=self.settings.image_model,
            modalities=["IMAGE"],
            options={"aspect_ratio": aspect_ratio},
        )

    def _wants_style(self, request: GenerateImageInput) -> bool:
        if request.classify_style is not None:
            return request.classify_style
        return self.settings.classify_art_style

    async def _style_instructions(self, request: GenerateImageInput) -> Optional[str]:
        photo = PhotoAsset.from_data_uri(request.photo_data_uri)
        try:
            analysis = await self.style_analyzer.classify_art_style(photo, request.poem)
        except Exception as e:
            logger.warning(f"[Image] Style classification failed, painting without it: {e}")
            return None
        return analysis.style_instructions

    async def generate(self, request: GenerateImageInput) -> PhotoAsset:
        prompt = self.build_prompt(request)
        synthesis = is_synthesis_request(request)

        if not synthesis and self._wants_style(request):
            style_instructions = await self._style_instructions(request)
            if style_instructions:
                prompt = self.build_prompt(request, style_instructions=style_instructions)

        logger.info(
            f"[Image] Generating {'synthesis' if synthesis else 'artwork'} image "
            f"({len(prompt.media)} photo(s), {prompt.options['aspect_ratio']})"
        )

        payload = await self.client.generate_media(
            prompt.parts, prompt.modalities, model=prompt.model
        )
        logger.info(f"[Image] Done ({len(payload.data)} bytes, {payload.mime_type})")
        return PhotoAsset(mime_type=payload.mime_type, data=payload.data)
