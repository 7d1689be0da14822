"""
Poem Generation Skill - photo → poem.

One structured Gemini call: the poem prompt (tone and style filled in)
followed by the photo, answered as {"poem": "..."}.
"""

import logging

from pydantic import BaseModel, Field

from config import GenerationSettings
from agent.errors import MissingOutputError, ValidationError
from agent.gemini_client import GeminiClient, NO_TEXT_OUTPUT_MESSAGE
from agent.prompts import Prompts
from models.media import PhotoAsset
from models.poem import PoemRecord
from models.prompt import BuiltPrompt, PromptPart
from models.requests import GeneratePoemInput

logger = logging.getLogger(__name__)


class PoemOutput(BaseModel):
    poem: str = Field(description="The generated poem.")


class PoemGenerator:
    """Generate a poem that captures the essence of a photo."""

    def __init__(self, client: GeminiClient, settings: GenerationSettings):
        self.client = client
        self.settings = settings

    def build_prompt(self, request: GeneratePoemInput) -> BuiltPrompt:
        if not request.photo_data_uri:
            raise ValidationError("Photo data is missing.")

        photo = PhotoAsset.from_data_uri(request.photo_data_uri)
        text = Prompts.GENERATE_POEM.format(
            tone=request.tone or self.settings.default_tone,
            style=request.style or self.settings.default_style,
        )
        return BuiltPrompt(
            parts=[PromptPart.from_text(text), PromptPart.from_media(photo)],
            model=self.settings.text_model,
            output_schema=PoemOutput,
        )

    async def generate(self, request: GeneratePoemInput) -> PoemRecord:
        prompt = self.build_prompt(request)
        tone = request.tone or self.settings.default_tone
        style = request.style or self.settings.default_style

        logger.info(f"[Poem] Writing a {tone} {style} poem ({prompt.media[0]!r})")
        output = await self.client.generate_text(
            prompt.parts, prompt.output_schema, model=prompt.model
        )
        if not output.poem or not output.poem.strip():
            raise MissingOutputError(NO_TEXT_OUTPUT_MESSAGE)

        logger.info(f"[Poem] Done ({len(output.poem)} chars)")
        return PoemRecord.create(output.poem, tone=tone, style=style)
