"""
Image Understanding Skill - pick an art style for a photo and its poem.

Used before painting artwork from a poem: one JSON call returns a style
name and short painter instructions that are folded into the artwork
prompt.
"""

import logging

from pydantic import BaseModel, Field

from config import GenerationSettings
from agent.gemini_client import GeminiClient
from agent.prompts import Prompts
from models.media import PhotoAsset
from models.prompt import BuiltPrompt, PromptPart

logger = logging.getLogger(__name__)


class StyleAnalysis(BaseModel):
    style_name: str = Field(description="Short name of the art style.")
    style_instructions: str = Field(description="How to render the scene in this style.")


class ImageUnderstanding:
    """
    Gemini powered style classification.

    Looks at what the photo shows and what the poem feels like, and
    suggests how the artwork should be painted.
    """

    def __init__(self, client: GeminiClient, settings: GenerationSettings):
        self.client = client
        self.settings = settings

    def build_prompt(self, photo: PhotoAsset, poem: str) -> BuiltPrompt:
        return BuiltPrompt(
            parts=[
                PromptPart.from_text(Prompts.CLASSIFY_ART_STYLE.format(poem=poem)),
                PromptPart.from_media(photo),
            ],
            model=self.settings.text_model,
            output_schema=StyleAnalysis,
        )

    async def classify_art_style(self, photo: PhotoAsset, poem: str) -> StyleAnalysis:
        prompt = self.build_prompt(photo, poem)
        analysis = await self.client.generate_text(
            prompt.parts, prompt.output_schema, model=prompt.model
        )
        logger.info(f"[Style] Suggested style: {analysis.style_name}")
        return analysis
