"""
Configuration for Photo Poet.

Model Selection:
- Poems, revisions and style analysis: gemini-2.5-flash
- Image synthesis and artwork: gemini-2.5-flash-image
- Narration and voice probes: gemini-2.5-flash-preview-tts
- Animation: veo-2.0-generate-001

API Access:
- Google AI Studio key in GEMINI_API_KEY (GOOGLE_API_KEY is accepted too)

Everything here is read once at import. Request handlers never touch these
module constants directly; they receive a GenerationSettings snapshot.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# =============================================================================
# Model Configuration
# =============================================================================

DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "gemini-2.5-flash-image")
TEXT_MODEL = os.getenv("TEXT_MODEL", "gemini-2.5-flash")
IMAGE_MODEL = os.getenv("IMAGE_MODEL", "gemini-2.5-flash-image")
TTS_MODEL = os.getenv("TTS_MODEL", "gemini-2.5-flash-preview-tts")
VEO_MODEL = os.getenv("VEO_MODEL", "veo-2.0-generate-001")

# =============================================================================
# API Configuration
# =============================================================================

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")

# Protocol versions the backend can talk; the first one is used
SUPPORTED_API_VERSIONS = ("v1beta", "v1")
GEMINI_API_VERSION = os.getenv("GEMINI_API_VERSION", SUPPORTED_API_VERSIONS[0])

# =============================================================================
# Paths
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.resolve()  # Always absolute
SKILLS_DIR = PROJECT_ROOT / "skills"
LOGS_DIR = PROJECT_ROOT / "logs"

# =============================================================================
# Poem Settings
# =============================================================================

TONES = ["Reflective", "Joyful", "Melancholic", "Romantic", "Humorous", "Dramatic"]
STYLES = ["Free Verse", "Haiku", "Sonnet", "Limerick", "Ode"]

DEFAULT_TONE = "Reflective"
DEFAULT_STYLE = "Free Verse"

# =============================================================================
# Image Settings
# =============================================================================

ASPECT_RATIOS = ["1:1", "16:9", "4:3", "9:16", "3:4"]
DEFAULT_ASPECT_RATIO = "1:1"

# Upload limits (per synthesis request)
MAX_PHOTOS = 3
MAX_PHOTO_SIZE_MB = 4

# Run a style-analysis call before painting artwork from a poem
CLASSIFY_ART_STYLE = os.getenv("CLASSIFY_ART_STYLE", "false").lower() == "true"

# =============================================================================
# Speech Settings
# =============================================================================

SUPPORTED_VOICES = [
    "achernar", "achird", "algenib", "algieba", "alnilam", "aoede", "autonoe",
    "callirrhoe", "charon", "despina", "enceladus", "erinome", "fenrir", "gacrux",
    "iapetus", "kore", "laomedeia", "leda", "orus", "puck", "pulcherrima", "rasalgethi",
    "sadachbia", "sadaltager", "schedar", "sulafat", "umbriel", "vindemiatrix",
    "zephyr", "zubenelgenubi",
]
DEFAULT_VOICE = "algenib"

# Audio format constants (Gemini TTS returns raw PCM)
SAMPLE_RATE = 24000
CHANNELS = 1
SAMPLE_WIDTH = 2  # 16-bit

# =============================================================================
# Video Settings
# =============================================================================

VIDEO_DURATION_SECONDS = 5
VIDEO_ASPECT_RATIO = "16:9"
VIDEO_PERSON_GENERATION = "allow_adult"

# Veo polling settings
VIDEO_POLL_INTERVAL_SECONDS = float(os.getenv("VIDEO_POLL_INTERVAL_SECONDS", "5"))
VIDEO_POLL_BACKOFF = float(os.getenv("VIDEO_POLL_BACKOFF", "1.0"))
VIDEO_POLL_MAX_INTERVAL_SECONDS = float(os.getenv("VIDEO_POLL_MAX_INTERVAL_SECONDS", "30"))
VIDEO_MAX_WAIT_SECONDS = float(os.getenv("VIDEO_MAX_WAIT_SECONDS", "300"))  # 0 = no limit
MEDIA_DOWNLOAD_TIMEOUT_SECONDS = float(os.getenv("MEDIA_DOWNLOAD_TIMEOUT_SECONDS", "60"))

# =============================================================================
# Agent Settings
# =============================================================================

# Temperature for ALL Gemini calls
TEMPERATURE_CREATIVE = 1

# =============================================================================
# Logging
# =============================================================================

import logging

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


# =============================================================================
# Settings snapshot
# =============================================================================


@dataclass(frozen=True)
class GenerationSettings:
    """
    Immutable, process-wide generation settings.

    Built once at startup and handed to every action, so a test can swap in
    its own values (or its own client) without touching module globals.
    """

    api_key: Optional[str] = None
    api_version: str = GEMINI_API_VERSION

    default_model: str = DEFAULT_MODEL
    text_model: str = TEXT_MODEL
    image_model: str = IMAGE_MODEL
    tts_model: str = TTS_MODEL
    video_model: str = VEO_MODEL

    temperature: float = TEMPERATURE_CREATIVE

    default_tone: str = DEFAULT_TONE
    default_style: str = DEFAULT_STYLE
    default_aspect_ratio: str = DEFAULT_ASPECT_RATIO
    default_voice: str = DEFAULT_VOICE
    classify_art_style: bool = CLASSIFY_ART_STYLE
    max_photos: int = MAX_PHOTOS
    max_photo_size_mb: float = MAX_PHOTO_SIZE_MB

    video_duration_seconds: int = VIDEO_DURATION_SECONDS
    video_aspect_ratio: str = VIDEO_ASPECT_RATIO
    video_person_generation: str = VIDEO_PERSON_GENERATION
    video_poll_interval_seconds: float = VIDEO_POLL_INTERVAL_SECONDS
    video_poll_backoff: float = VIDEO_POLL_BACKOFF
    video_poll_max_interval_seconds: float = VIDEO_POLL_MAX_INTERVAL_SECONDS
    video_max_wait_seconds: Optional[float] = VIDEO_MAX_WAIT_SECONDS or None
    media_download_timeout_seconds: float = MEDIA_DOWNLOAD_TIMEOUT_SECONDS

    def __post_init__(self):
        if self.api_version not in SUPPORTED_API_VERSIONS:
            raise ValueError(
                f"Unsupported GEMINI_API_VERSION '{self.api_version}'. "
                f"Expected one of: {', '.join(SUPPORTED_API_VERSIONS)}"
            )
        if self.video_poll_backoff < 1.0:
            raise ValueError("VIDEO_POLL_BACKOFF must be >= 1.0")


def load_settings() -> GenerationSettings:
    """Snapshot the current configuration."""
    return GenerationSettings(api_key=GEMINI_API_KEY)


def get_gemini_client(settings: GenerationSettings = None):
    """
    Build the google-genai client for AI Studio.

    Raises MisconfigurationError when no API key is configured, so the
    failure is reported to users like any other bad-credential error.
    """
    from google import genai
    from google.genai import types

    from agent.errors import MisconfigurationError

    settings = settings or load_settings()
    if not settings.api_key:
        raise MisconfigurationError(
            "API key not valid: GEMINI_API_KEY is not set. "
            "Set GEMINI_API_KEY (or GOOGLE_API_KEY) in the environment or .env file."
        )
    return genai.Client(
        api_key=settings.api_key,
        http_options=types.HttpOptions(api_version=settings.api_version),
    )


# =============================================================================
# Print Configuration (for debugging)
# =============================================================================


def print_config():
    """Print current configuration for debugging."""
    print(f"""
Photo Poet Configuration
========================
Text model: {TEXT_MODEL}
Image model: {IMAGE_MODEL}
TTS model: {TTS_MODEL}
Video model: {VEO_MODEL}
API version: {GEMINI_API_VERSION}
API key: {"set" if GEMINI_API_KEY else "NOT SET"}
Video wait limit: {VIDEO_MAX_WAIT_SECONDS or "none"}s
Log Level: {LOG_LEVEL}
""")


if __name__ == "__main__":
    print_config()
