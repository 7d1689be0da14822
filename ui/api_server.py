"""
API Server for Photo Poet.

This FastAPI server provides:
1. One POST endpoint per generation action (poem, revision, speech, image,
   video, voice probes) plus a generic tagged-union endpoint
2. Options and skill metadata for the browser client
3. An edge filter that answers scanner traffic before any app logic runs

Every action endpoint answers 200 with either the success payload or
{"error": "<sentence>"}.

Run with: uvicorn api_server:app --reload --port 8000
"""

import logging
import os
import time
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from agent.actions import (
    ActionContext,
    customize_poem_action,
    dispatch_action,
    generate_image_action,
    generate_poem_action,
    generate_video_action,
    test_voice_action,
    test_voices_action,
    text_to_speech_action,
)
from models.requests import (
    CustomizePoemInput,
    GenerateImageInput,
    GeneratePoemInput,
    GenerateVideoInput,
    GenerationEnvelope,
    TestVoiceInput,
    TestVoicesInput,
    TextToSpeechInput,
)
from skills import list_skills

# =============================================================================
# Setup Logging - File + Console
# =============================================================================

config.LOGS_DIR.mkdir(exist_ok=True)

# Generate session log filename with timestamp
_session_start = time.strftime("%Y%m%d_%H%M%S")
_log_file = config.LOGS_DIR / f"server_{_session_start}.log"

# Configure logging to both file and console
# Use force=True to override any existing handlers (uvicorn issue)
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler(_log_file, mode="a"),
        logging.StreamHandler(),
    ],
    force=True,
)
logger = logging.getLogger("api_server")
logger.info(f"Server session started. Log file: {_log_file}")

# Initialize FastAPI app
app = FastAPI(
    title="Photo Poet API",
    description="Poems, artwork, narration and animation from photos, powered by Gemini",
    version="0.1.0",
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Settings + client, built once. The SDK client itself is created on first use.
action_context = ActionContext.create()


def get_action_context() -> ActionContext:
    """Dependency: the process-wide action context (overridden in tests)."""
    return action_context


# =============================================================================
# Edge filter
# =============================================================================

BLOCKED_PATTERNS = [".php", ".env", "wp-login", "wp-admin"]


@app.middleware("http")
async def edge_filter(request: Request, call_next):
    """Short-circuit vulnerability scans and stray POSTs to the root."""
    path = request.url.path
    if any(pattern in path for pattern in BLOCKED_PATTERNS):
        logger.info(f"[Edge] Blocked {request.method} {path}")
        return Response(status_code=404)
    if request.method == "POST" and path == "/":
        return PlainTextResponse("OK")
    return await call_next(request)


# =============================================================================
# Info Endpoints
# =============================================================================

@app.get("/")
async def root():
    return {"message": "Photo Poet API", "status": "running"}


@app.get("/health")
async def health(context: ActionContext = Depends(get_action_context)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "text_model": context.settings.text_model,
        "api_key_configured": bool(context.settings.api_key),
    }


@app.get("/api/options")
async def options(context: ActionContext = Depends(get_action_context)):
    """Choices the browser offers (tones, styles, voices, ratios) and upload limits."""
    settings = context.settings
    return {
        "tones": config.TONES,
        "styles": config.STYLES,
        "voices": config.SUPPORTED_VOICES,
        "aspectRatios": config.ASPECT_RATIOS,
        "defaults": {
            "tone": settings.default_tone,
            "style": settings.default_style,
            "voice": settings.default_voice,
            "aspectRatio": settings.default_aspect_ratio,
        },
        "limits": {
            "maxPhotos": settings.max_photos,
            "maxPhotoSizeMb": settings.max_photo_size_mb,
        },
    }


@app.get("/api/skills")
async def skills():
    """Skill metadata parsed from each SKILL.md."""
    return {"skills": list_skills()}


@app.get("/api/debug/logs")
async def get_debug_logs(lines: int = 100):
    """
    Recent server log lines (default 100, max 500).

        curl http://localhost:8000/api/debug/logs?lines=50
    """
    lines = min(max(lines, 1), 500)

    if not _log_file.exists():
        return {"status": "error", "message": "Log file not found"}

    with open(_log_file, "r") as f:
        all_lines = f.readlines()
    recent_lines = all_lines[-lines:]

    return {
        "status": "ok",
        "log_file": str(_log_file),
        "total_lines": len(all_lines),
        "returned_lines": len(recent_lines),
        "logs": [line.strip() for line in recent_lines],
    }


# =============================================================================
# Action Endpoints
# =============================================================================

@app.post("/api/generate-poem")
async def generate_poem(request: GeneratePoemInput, context: ActionContext = Depends(get_action_context)):
    result = await generate_poem_action(request, context)
    return result.to_payload()


@app.post("/api/customize-poem")
async def customize_poem(request: CustomizePoemInput, context: ActionContext = Depends(get_action_context)):
    result = await customize_poem_action(request, context)
    return result.to_payload()


@app.post("/api/text-to-speech")
async def text_to_speech(request: TextToSpeechInput, context: ActionContext = Depends(get_action_context)):
    result = await text_to_speech_action(request, context)
    return result.to_payload()


@app.post("/api/generate-image")
async def generate_image(request: GenerateImageInput, context: ActionContext = Depends(get_action_context)):
    result = await generate_image_action(request, context)
    return result.to_payload()


@app.post("/api/generate-video")
async def generate_video(request: GenerateVideoInput, context: ActionContext = Depends(get_action_context)):
    result = await generate_video_action(request, context)
    return result.to_payload()


@app.post("/api/test-voice")
async def test_voice(request: TestVoiceInput, context: ActionContext = Depends(get_action_context)):
    result = await test_voice_action(request, context)
    return result.to_payload()


@app.post("/api/test-voices")
async def test_voices(request: TestVoicesInput, context: ActionContext = Depends(get_action_context)):
    results = await test_voices_action(request, context)
    return {"results": [result.to_payload() for result in results]}


@app.post("/api/generate")
async def generate(envelope: GenerationEnvelope, context: ActionContext = Depends(get_action_context)):
    """Any capability, selected by the request's ``capability`` tag."""
    result = await dispatch_action(envelope.request, context)
    return result.to_payload()


# =============================================================================
# Main
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    print("\n" + "=" * 60)
    print("Photo Poet API Server")
    print("=" * 60)
    print(f"Text model: {config.TEXT_MODEL}")
    print(f"API Docs: http://localhost:8000/docs")
    print("=" * 60 + "\n")

    is_production = os.getenv("PHOTO_POET_ENV") == "production"
    uvicorn.run(
        "api_server:app",
        host="0.0.0.0",
        port=8000,
        reload=not is_production,
        workers=2 if is_production else 1,
    )
