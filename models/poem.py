"""
Poem model - a generated poem and its revisions.

The first generated text is kept as ``original`` for the life of the record;
every tone revision starts from it, never from the previous revision.
"""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class PoemRecord:
    """A generated (and possibly revised) poem."""

    original: str
    text: str
    tone: Optional[str] = None
    style: Optional[str] = None

    def __post_init__(self):
        if not self.original:
            raise ValueError("Poem must have text")

    @classmethod
    def create(cls, text: str, tone: str = None, style: str = None) -> "PoemRecord":
        """Record a freshly generated poem."""
        return cls(original=text, text=text, tone=tone, style=style)

    def revised(self, text: str, tone: str) -> "PoemRecord":
        """Return a copy showing ``text``, keeping the original reference."""
        return replace(self, text=text, tone=tone)

    @property
    def is_revised(self) -> bool:
        return self.text != self.original
