"""
Test doubles shared by the test modules.

FakeGeminiClient stands in for agent.gemini_client.GeminiClient: same async
methods, scripted answers, and a record of every call so tests can assert
that validation failures never reach the remote side.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import GenerationSettings
from agent.actions import ActionContext
from agent.gemini_client import MediaPayload
from models.operation import Operation

PHOTO_URI = "data:image/png;base64,AAAA"
PHOTO_URI_2 = "data:image/jpeg;base64,BBBB"
PHOTO_URI_3 = "data:image/webp;base64,CCCC"

# 0.1s of silence at 24kHz, 16-bit mono
PCM_SILENCE = b"\x00\x00" * 2400


def make_settings(**overrides) -> GenerationSettings:
    values = dict(
        api_key="test-key",
        video_poll_interval_seconds=0,
        video_poll_backoff=1.0,
        video_max_wait_seconds=None,
        classify_art_style=False,
    )
    values.update(overrides)
    return GenerationSettings(**values)


def _answer(script, *args):
    """Scripted answer: an exception is raised, a callable is called, else returned."""
    if isinstance(script, BaseException):
        raise script
    if callable(script):
        return script(*args)
    return script


class FakeGeminiClient:
    """
    Scripted stand-in for GeminiClient.

    - text: {schema name: dict | Exception | callable(parts) -> dict}
    - media: MediaPayload | Exception | callable(parts, modalities, voice_name)
    - operations: [submit answer, poll 1 answer, poll 2 answer, ...]
    - download: bytes returned by fetch_media
    """

    def __init__(self, text=None, media=None, operations=None, download=b"\x00\x00\x00\x18ftypmp42"):
        self.text = text or {}
        self.media = media if media is not None else MediaPayload(
            data=PCM_SILENCE, mime_type="audio/L16;codec=pcm;rate=24000"
        )
        self.operations = list(operations or [])
        self.download = download
        self.calls: list[tuple[str, dict]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def calls_to(self, method: str) -> list[dict]:
        return [detail for name, detail in self.calls if name == method]

    async def generate_text(self, parts, output_schema, model=None):
        self.calls.append(("generate_text", {"parts": parts, "schema": output_schema, "model": model}))
        data = _answer(self.text[output_schema.__name__], parts)
        return output_schema(**data)

    async def generate_media(self, parts, modalities, model=None, voice_name=None):
        self.calls.append((
            "generate_media",
            {"parts": parts, "modalities": modalities, "model": model, "voice_name": voice_name},
        ))
        return _answer(self.media, parts, modalities, voice_name)

    async def start_operation(self, prompt, image, model=None, **options):
        self.calls.append(("start_operation", {"prompt": prompt, "image": image, "model": model, **options}))
        return _answer(self.operations.pop(0))

    async def poll_operation(self, operation):
        self.calls.append(("poll_operation", {"operation": operation}))
        return _answer(self.operations.pop(0))

    async def fetch_media(self, url):
        self.calls.append(("fetch_media", {"url": url}))
        return _answer(self.download, url)


def make_context(client: FakeGeminiClient = None, **settings_overrides) -> ActionContext:
    return ActionContext(settings=make_settings(**settings_overrides), client=client or FakeGeminiClient())


def pending(name: str = "operations/veo-1") -> Operation:
    return Operation(handle=object(), name=name, done=False)


def finished(name: str = "operations/veo-1", url: str = "https://example.test/video.mp4", error: str = None) -> Operation:
    return Operation(handle=object(), name=name, done=True, media_url=None if error else url, error=error)
