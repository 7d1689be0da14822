"""
TTS Generation Skill - Gemini TTS narration.

Generates speech audio from poem text with:
- One of the prebuilt Gemini voices
- Raw PCM framed into a WAV container (mono, 24kHz, 16-bit)
- Output as a self-contained data URI
"""

import io
import logging
import re
import wave
from dataclasses import dataclass
from typing import Optional

from config import (
    CHANNELS,
    SAMPLE_RATE,
    SAMPLE_WIDTH,
    SUPPORTED_VOICES,
    GenerationSettings,
)
from agent.errors import ValidationError
from agent.gemini_client import GeminiClient, MediaPayload
from models.media import encode_data_uri
from models.prompt import BuiltPrompt, PromptPart
from models.requests import TextToSpeechInput

logger = logging.getLogger(__name__)

# Audio that already has a container is passed through untouched
CONTAINER_MIME_TYPES = {
    "audio/wav": "audio/wav",
    "audio/x-wav": "audio/wav",
    "audio/wave": "audio/wav",
    "audio/mpeg": "audio/mpeg",
    "audio/mp3": "audio/mpeg",
    "audio/ogg": "audio/ogg",
}

_RATE_PARAM = re.compile(r"rate=(\d+)")


@dataclass
class TTSResult:
    """Result of TTS generation."""
    audio_data_uri: str
    duration_seconds: Optional[float]
    voice_used: str


def _pcm_to_wav(pcm_data: bytes, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Wrap raw PCM in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(CHANNELS)
        wf.setsampwidth(SAMPLE_WIDTH)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm_data)
    return buffer.getvalue()


def _calculate_duration(pcm_data: bytes, sample_rate: int = SAMPLE_RATE) -> float:
    """Calculate audio duration from PCM data."""
    return len(pcm_data) / (sample_rate * CHANNELS * SAMPLE_WIDTH)


def audio_to_data_uri(payload: MediaPayload) -> tuple[str, Optional[float]]:
    """
    Turn a TTS payload into (data URI, duration).

    Gemini answers with ``audio/L16;codec=pcm;rate=24000``; anything already
    in a container format keeps its bytes and gets no duration.
    """
    base_type = payload.mime_type.split(";")[0].strip().lower()
    if base_type in CONTAINER_MIME_TYPES:
        return encode_data_uri(payload.data, CONTAINER_MIME_TYPES[base_type]), None

    match = _RATE_PARAM.search(payload.mime_type)
    sample_rate = int(match.group(1)) if match else SAMPLE_RATE
    wav_data = _pcm_to_wav(payload.data, sample_rate)
    return encode_data_uri(wav_data, "audio/wav"), _calculate_duration(payload.data, sample_rate)


def normalize_voice(voice_name: str) -> str:
    return voice_name.strip().lower()


class TTSGenerator:
    """
    Generate speech audio using Gemini TTS.

    Voices are restricted to the supported prebuilt set; the voice probe
    skill is the place to try anything else.
    """

    def __init__(self, client: GeminiClient, settings: GenerationSettings):
        self.client = client
        self.settings = settings

    def build_prompt(self, request: TextToSpeechInput) -> BuiltPrompt:
        if not request.text or not request.text.strip():
            raise ValidationError("Text to speak is missing.")

        voice = normalize_voice(request.voice_name or self.settings.default_voice)
        if voice not in SUPPORTED_VOICES:
            raise ValidationError(f"Unsupported voice '{request.voice_name}'.")

        return BuiltPrompt(
            parts=[PromptPart.from_text(request.text)],
            model=self.settings.tts_model,
            modalities=["AUDIO"],
            options={"voice_name": voice},
        )

    async def generate(self, request: TextToSpeechInput) -> TTSResult:
        prompt = self.build_prompt(request)
        voice = prompt.options["voice_name"]
        logger.info(f"[TTS] Generating with voice {voice}: {request.text[:50]}...")

        payload = await self.client.generate_media(
            prompt.parts, prompt.modalities, model=prompt.model, voice_name=voice
        )
        data_uri, duration = audio_to_data_uri(payload)

        if duration is not None:
            logger.info(f"[TTS] Done ({duration:.2f}s)")
        return TTSResult(audio_data_uri=data_uri, duration_seconds=duration, voice_used=voice)
