"""
Test: API Server

Verifies that:
1. Scanner paths get an empty 404 and POST / gets "OK", before any app logic
2. Action endpoints answer 200 with the camelCase result payload
3. Missing inputs come back as error payloads, not HTTP 422s
4. Options and skill metadata are served

Run: python tests/test_api_server.py
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from fastapi.testclient import TestClient

from ui.api_server import app, get_action_context

from fakes import PHOTO_URI, FakeGeminiClient, make_context, pending, finished

POEM = "Sun on water,\nLight dances free."


@pytest.fixture
def fake_client():
    client = FakeGeminiClient(
        text={
            "PoemOutput": {"poem": POEM},
            "RevisionOutput": {"revised_poem": "Moon on water"},
        },
    )
    app.dependency_overrides[get_action_context] = lambda: make_context(client)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def http(fake_client):
    return TestClient(app)


@pytest.mark.parametrize("path", [
    "/wp-login.php",
    "/wp-admin/setup-config",
    "/.env",
    "/config/.env.production",
    "/index.php",
])
def test_scanner_paths_blocked(http, fake_client, path):
    for method in ("get", "post"):
        response = getattr(http, method)(path)
        assert response.status_code == 404
        assert response.content == b""
    assert fake_client.call_count == 0


def test_post_root_short_circuits(http):
    response = http.post("/", json={"anything": True})
    assert response.status_code == 200
    assert response.text == "OK"


def test_get_root_and_health(http):
    assert http.get("/").json()["status"] == "running"
    health = http.get("/health").json()
    assert health["status"] == "healthy"
    assert health["api_key_configured"] is True


def test_generate_poem_endpoint(http):
    response = http.post(
        "/api/generate-poem",
        json={"photoDataUri": PHOTO_URI, "tone": "Joyful", "style": "Haiku"},
    )
    assert response.status_code == 200
    assert response.json() == {"poem": POEM}


def test_missing_input_is_not_422(http, fake_client):
    response = http.post("/api/generate-image", json={})
    assert response.status_code == 200
    assert response.json() == {"error": "Required image data or prompt is missing."}

    response = http.post("/api/customize-poem", json={"originalPoem": POEM})
    assert response.json() == {"error": "Original poem or new tone is missing."}
    assert fake_client.call_count == 0


def test_customize_and_speech_endpoints(http):
    revised = http.post("/api/customize-poem", json={"originalPoem": POEM, "tone": "Melancholic"})
    assert revised.json() == {"revisedPoem": "Moon on water"}

    audio = http.post("/api/text-to-speech", json={"text": POEM, "voiceName": "kore"})
    assert audio.json()["audioDataUri"].startswith("data:audio/wav;base64,")


def test_video_endpoint(http, fake_client):
    fake_client.operations = [pending(), finished()]
    response = http.post("/api/generate-video", json={"photoDataUri": PHOTO_URI})
    assert response.json()["videoDataUri"].startswith("data:video/mp4;base64,")


def test_voice_endpoints(http):
    single = http.post("/api/test-voice", json={"voiceName": "kore"}).json()
    assert single["voiceName"] == "kore"
    assert single["audioDataUri"].startswith("data:audio/wav;base64,")

    batch = http.post("/api/test-voices", json={"voiceNames": ["kore", ""]}).json()
    assert [r.get("error") for r in batch["results"]] == [None, "Voice name is missing."]


def test_generic_endpoint(http):
    response = http.post(
        "/api/generate",
        json={"request": {"capability": "poem", "photoDataUri": PHOTO_URI}},
    )
    assert response.json() == {"poem": POEM}

    unknown = http.post("/api/generate", json={"request": {"capability": "sculpture"}})
    assert unknown.status_code == 422


def test_options_and_skills(http):
    options = http.get("/api/options").json()
    assert "Haiku" in options["styles"]
    assert options["defaults"]["voice"] == "algenib"
    assert options["limits"]["maxPhotos"] == 3
    assert "16:9" in options["aspectRatios"]

    names = {skill["name"] for skill in http.get("/api/skills").json()["skills"]}
    assert {"generate_poem", "generate_video", "test_voice"} <= names


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
