"""
Prompt model - what a request builder hands to the remote client.

A BuiltPrompt is an ordered list of text and media parts plus the shape the
response must have: a pydantic schema for structured text, or the media
modalities to ask for.
"""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel

from .media import PhotoAsset


@dataclass(frozen=True)
class PromptPart:
    """One prompt segment: text or media, never both."""

    text: Optional[str] = None
    media: Optional[PhotoAsset] = None

    def __post_init__(self):
        if (self.text is None) == (self.media is None):
            raise ValueError("PromptPart needs exactly one of text or media")

    @classmethod
    def from_text(cls, text: str) -> "PromptPart":
        return cls(text=text)

    @classmethod
    def from_media(cls, media: PhotoAsset) -> "PromptPart":
        return cls(media=media)

    @property
    def is_media(self) -> bool:
        return self.media is not None


@dataclass(frozen=True)
class BuiltPrompt:
    """A fully assembled prompt for one remote call."""

    parts: list[PromptPart]
    model: str
    output_schema: Optional[type[BaseModel]] = None
    modalities: list[str] = field(default_factory=list)
    options: dict = field(default_factory=dict)

    @property
    def text(self) -> str:
        """All text segments joined, for logging and tests."""
        return "\n".join(p.text for p in self.parts if p.text is not None)

    @property
    def media(self) -> list[PhotoAsset]:
        return [p.media for p in self.parts if p.media is not None]
