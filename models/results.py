"""
Result records - the output of each generation action.

A result carries either its success payload or a user-facing error
sentence. Never both, never neither.
"""

from typing import ClassVar, Optional

from pydantic import model_validator

from .requests import CamelModel


class GenerationResult(CamelModel):
    """Base for every action result."""

    success_field: ClassVar[str] = ""

    error: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self):
        value = getattr(self, self.success_field, None)
        if (value is None) == (self.error is None):
            raise ValueError(
                f"{type(self).__name__} needs exactly one of "
                f"'{self.success_field}' or 'error'"
            )
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def value(self):
        return getattr(self, self.success_field)

    @classmethod
    def success(cls, value) -> "GenerationResult":
        return cls(**{cls.success_field: value})

    @classmethod
    def failure(cls, message: str) -> "GenerationResult":
        return cls(error=message)

    def to_payload(self) -> dict:
        """Wire form: camelCase keys, unset side omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class PoemResult(GenerationResult):
    success_field: ClassVar[str] = "poem"
    poem: Optional[str] = None


class RevisionResult(GenerationResult):
    success_field: ClassVar[str] = "revised_poem"
    revised_poem: Optional[str] = None


class SpeechResult(GenerationResult):
    success_field: ClassVar[str] = "audio_data_uri"
    audio_data_uri: Optional[str] = None


class ImageResult(GenerationResult):
    success_field: ClassVar[str] = "image_data_uri"
    image_data_uri: Optional[str] = None


class VideoResult(GenerationResult):
    success_field: ClassVar[str] = "video_data_uri"
    video_data_uri: Optional[str] = None


class VoiceTestResult(GenerationResult):
    success_field: ClassVar[str] = "audio_data_uri"
    audio_data_uri: Optional[str] = None
    voice_name: Optional[str] = None
