"""
Data models for Photo Poet.

Transient, request-scoped records:
- PhotoAsset (uploaded or generated image as a data URI)
- PoemRecord (generated poem and its revisions)
- Operation (long-running video job)
- Request / result records exchanged with the browser
"""

from .capability import Capability
from .media import PhotoAsset, encode_data_uri, parse_data_uri
from .operation import Operation
from .poem import PoemRecord
from .prompt import BuiltPrompt, PromptPart
from .requests import (
    CustomizePoemInput,
    GenerateImageInput,
    GeneratePoemInput,
    GenerateVideoInput,
    GenerationEnvelope,
    GenerationRequest,
    TestVoiceInput,
    TestVoicesInput,
    TextToSpeechInput,
)
from .results import (
    GenerationResult,
    ImageResult,
    PoemResult,
    RevisionResult,
    SpeechResult,
    VideoResult,
    VoiceTestResult,
)

__all__ = [
    "Capability",
    "PhotoAsset",
    "encode_data_uri",
    "parse_data_uri",
    "Operation",
    "PoemRecord",
    "BuiltPrompt",
    "PromptPart",
    "CustomizePoemInput",
    "GenerateImageInput",
    "GeneratePoemInput",
    "GenerateVideoInput",
    "GenerationEnvelope",
    "GenerationRequest",
    "TestVoiceInput",
    "TestVoicesInput",
    "TextToSpeechInput",
    "GenerationResult",
    "ImageResult",
    "PoemResult",
    "RevisionResult",
    "SpeechResult",
    "VideoResult",
    "VoiceTestResult",
]
