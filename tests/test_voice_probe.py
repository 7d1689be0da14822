"""
Test: Voice Probes

Verifies that:
1. A batch of probes gives one result per voice, in order
2. One failing voice never affects another
3. Default and custom probe text
4. Any non-empty voice name is accepted for probing

Run: python tests/test_voice_probe.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from agent.actions import test_voice_action, test_voices_action
from agent.gemini_client import MediaPayload
from models.requests import TestVoiceInput, TestVoicesInput

from fakes import PCM_SILENCE, FakeGeminiClient, make_context


def fail_for(*bad_voices):
    """Media script that raises for the given voices."""

    def answer(parts, modalities, voice_name):
        if voice_name in bad_voices:
            raise RuntimeError(f"Voice {voice_name} is not supported")
        return MediaPayload(data=PCM_SILENCE, mime_type="audio/L16;codec=pcm;rate=24000")

    return answer


def test_batch_isolates_failures():
    """alpha works, beta throws → alpha has audio, beta only an error."""
    print("=" * 60)
    print("TEST: Voice probe batch")
    print("=" * 60)

    client = FakeGeminiClient(media=fail_for("beta"))
    results = asyncio.run(
        test_voices_action(TestVoicesInput(voice_names=["alpha", "beta"]), make_context(client))
    )

    alpha, beta = results
    assert alpha.voice_name == "alpha"
    assert alpha.audio_data_uri.startswith("data:audio/wav;base64,")
    assert alpha.error is None

    assert beta.voice_name == "beta"
    assert beta.audio_data_uri is None
    assert beta.error == "An unexpected error occurred. Please try again."
    assert beta.to_payload() == {"error": beta.error, "voiceName": "beta"}
    print("✓ alpha ok, beta failed on its own")


def test_batch_order_and_count():
    voices = ["kore", "nope", "puck", "zephyr", "bad"]
    client = FakeGeminiClient(media=fail_for("nope", "bad"))
    results = asyncio.run(test_voices_action(TestVoicesInput(voice_names=voices), make_context(client)))

    assert [r.voice_name for r in results] == voices
    assert [r.ok for r in results] == [True, False, True, True, False]
    assert len(client.calls_to("generate_media")) == len(voices)


def test_batch_blank_name_is_per_voice():
    client = FakeGeminiClient()
    results = asyncio.run(test_voices_action(TestVoicesInput(voice_names=["kore", "  "]), make_context(client)))
    assert results[0].ok
    assert results[1].error == "Voice name is missing."
    assert len(client.calls_to("generate_media")) == 1


def test_default_probe_text():
    client = FakeGeminiClient()
    result = asyncio.run(test_voice_action(TestVoiceInput(voice_name="Orus"), make_context(client)))

    assert result.ok
    call = client.calls_to("generate_media")[0]
    assert call["parts"][0].text == "Hello, this is a test of the Orus voice."
    assert call["voice_name"] == "Orus"
    assert call["modalities"] == ["AUDIO"]


def test_custom_probe_text_and_unknown_voice():
    client = FakeGeminiClient()
    result = asyncio.run(
        test_voice_action(TestVoiceInput(voice_name="not-a-listed-voice", text="Testing, testing."), make_context(client))
    )
    assert result.ok
    assert client.calls_to("generate_media")[0]["parts"][0].text == "Testing, testing."


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print(" VOICE PROBE TESTS")
    print("=" * 60 + "\n")

    tests = [
        test_batch_isolates_failures,
        test_batch_order_and_count,
        test_batch_blank_name_is_per_voice,
        test_default_probe_text,
        test_custom_probe_text_and_unknown_voice,
    ]
    failed = 0
    for test in tests:
        try:
            test()
            print(f"✓ {test.__name__}")
        except AssertionError as e:
            failed += 1
            print(f"✗ {test.__name__}: {e}")

    if failed:
        print(f"\n❌ {failed} TEST(S) FAILED\n")
        sys.exit(1)
    print("\n✅ ALL TESTS PASSED\n")
