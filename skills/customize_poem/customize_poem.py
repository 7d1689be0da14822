"""
Tone Revision Skill - poem + tone → revised poem.
"""

import logging

from pydantic import BaseModel, Field

from config import GenerationSettings
from agent.errors import MissingOutputError, ValidationError
from agent.gemini_client import GeminiClient, NO_TEXT_OUTPUT_MESSAGE
from agent.prompts import Prompts
from models.prompt import BuiltPrompt, PromptPart
from models.requests import CustomizePoemInput

logger = logging.getLogger(__name__)


class RevisionOutput(BaseModel):
    revised_poem: str = Field(description="The poem revised with the specified tone.")


class PoemReviser:
    """Re-tone a poem, preserving its subject and overall structure."""

    def __init__(self, client: GeminiClient, settings: GenerationSettings):
        self.client = client
        self.settings = settings

    def build_prompt(self, request: CustomizePoemInput) -> BuiltPrompt:
        if not request.original_poem or not request.tone:
            raise ValidationError("Original poem or new tone is missing.")

        text = Prompts.CUSTOMIZE_POEM.format(
            original_poem=request.original_poem,
            tone=request.tone,
        )
        return BuiltPrompt(
            parts=[PromptPart.from_text(text)],
            model=self.settings.text_model,
            output_schema=RevisionOutput,
        )

    async def generate(self, request: CustomizePoemInput) -> str:
        prompt = self.build_prompt(request)
        logger.info(f"[Revision] Re-toning poem as {request.tone}")

        output = await self.client.generate_text(
            prompt.parts, prompt.output_schema, model=prompt.model
        )
        if not output.revised_poem or not output.revised_poem.strip():
            raise MissingOutputError(NO_TEXT_OUTPUT_MESSAGE)
        return output.revised_poem
