"""
Request records - the input of each generation action.

Wire names are camelCase (``photoDataUri``) to match the browser client;
Python code uses the snake_case attribute names. Every field is optional at
the schema level: deciding what is *missing* is the action layer's job, and
it answers with an error result rather than an HTTP 422.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for records exchanged with the browser."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GeneratePoemInput(CamelModel):
    """Photo → poem."""
    capability: Literal["poem"] = "poem"
    photo_data_uri: Optional[str] = None
    tone: Optional[str] = None
    style: Optional[str] = None


class CustomizePoemInput(CamelModel):
    """Poem + tone → revised poem."""
    capability: Literal["revision"] = "revision"
    original_poem: Optional[str] = None
    tone: Optional[str] = None


class TextToSpeechInput(CamelModel):
    """Text + voice → narrated WAV."""
    capability: Literal["audio"] = "audio"
    text: Optional[str] = None
    voice_name: Optional[str] = None


class GenerateImageInput(CamelModel):
    """
    Two mutually exclusive modes:
    - photo_data_uris + prompt: synthesize a new image from references
    - photo_data_uri + poem: paint artwork for a poem
    """
    capability: Literal["image"] = "image"
    poem: Optional[str] = None
    prompt: Optional[str] = None
    photo_data_uri: Optional[str] = None
    photo_data_uris: Optional[list[str]] = None
    aspect_ratio: Optional[str] = None
    classify_style: Optional[bool] = None


class GenerateVideoInput(CamelModel):
    """Photo → short animated clip."""
    capability: Literal["video"] = "video"
    photo_data_uri: Optional[str] = None


class TestVoiceInput(CamelModel):
    """Probe one voice, optionally with custom text."""
    __test__ = False  # not a pytest test class

    capability: Literal["voice_test"] = "voice_test"
    voice_name: Optional[str] = None
    text: Optional[str] = None


class TestVoicesInput(CamelModel):
    """Probe several voices independently."""
    __test__ = False

    voice_names: list[str] = Field(default_factory=list)
    text: Optional[str] = None


GenerationRequest = Annotated[
    Union[
        GeneratePoemInput,
        CustomizePoemInput,
        TextToSpeechInput,
        GenerateImageInput,
        GenerateVideoInput,
        TestVoiceInput,
    ],
    Field(discriminator="capability"),
]


class GenerationEnvelope(CamelModel):
    """Body of the generic /api/generate endpoint."""
    request: GenerationRequest
