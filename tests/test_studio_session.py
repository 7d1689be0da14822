"""
Test: Studio Session

Walks the client-side flows end to end against a scripted client:
1. photos → description → synthesized image → chained poem
2. single photo → poem
3. revisions from the original, audio re-narration, voice changes
4. secondary generations (audio, artwork, video) with their own sub-state
5. failures as notifications, never dead ends
6. stale results dropped after reset

Run: python tests/test_studio_session.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from agent.gemini_client import MediaPayload
from ui.studio_session import SecondaryStatus, SessionError, StudioSession
from ui.view_state import InvalidTransition, ViewState

from fakes import PHOTO_URI, PHOTO_URI_2, PHOTO_URI_3, FakeGeminiClient, finished, make_context, pending

POEM = "Sun on water,\nLight dances free."
SYNTHESIZED = MediaPayload(data=b"\x89PNG-synth", mime_type="image/png")


class GatedClient(FakeGeminiClient):
    """Holds text and media calls until ``gate`` is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.gate = asyncio.Event()

    async def generate_text(self, *args, **kwargs):
        await self.gate.wait()
        return await super().generate_text(*args, **kwargs)

    async def generate_media(self, *args, **kwargs):
        await self.gate.wait()
        return await super().generate_media(*args, **kwargs)


async def let_tasks_run():
    for _ in range(5):
        await asyncio.sleep(0)


def poem_client(**kwargs) -> FakeGeminiClient:
    text = {
        "PoemOutput": {"poem": POEM},
        "RevisionOutput": lambda parts: {"revised_poem": "Revised: " + parts[0].text.split("have a ")[1].split(" tone")[0]},
    }
    text.update(kwargs.pop("text", {}))
    return FakeGeminiClient(text=text, **kwargs)


async def ready_session(client, **settings) -> StudioSession:
    session = StudioSession(make_context(client, **settings))
    await session.upload_single_photo(PHOTO_URI, tone="Joyful", style="Haiku")
    return session


# =============================================================================
# Main flows
# =============================================================================

def test_synthesis_then_poem():
    client = poem_client(media=SYNTHESIZED)

    async def scenario():
        session = StudioSession(make_context(client))
        session.select_photos([PHOTO_URI, PHOTO_URI_2])
        assert session.state is ViewState.IMAGES_SELECTED
        session.open_description()
        poem = await session.submit_prompt("the two of us on a beach")
        return session, poem

    session, poem = asyncio.run(scenario())

    assert session.state is ViewState.POEM_READY
    assert poem.text == POEM
    assert [name for name, _ in client.calls] == ["generate_media", "generate_text"]
    # The poem is written about the synthesized image, not the uploads
    poem_photo = client.calls_to("generate_text")[0]["parts"][1].media
    assert poem_photo.data == b"\x89PNG-synth"
    assert session.photo.startswith("data:image/png;base64,")
    assert session.notifications == []
    print("✓ Synthesis chained into poem")


def test_synthesis_failure_notifies_and_skips_poem():
    client = poem_client(media=RuntimeError("Deadline exceeded"))

    async def scenario():
        session = StudioSession(make_context(client))
        session.select_photos([PHOTO_URI])
        session.open_description()
        await session.submit_prompt("a picnic")
        return session

    session = asyncio.run(scenario())

    assert session.state is ViewState.ERROR
    assert client.calls_to("generate_text") == []
    (notification,) = session.pop_notifications()
    assert notification.title == "Error Generating Image"
    assert notification.description == "The AI is taking a bit too long to respond. Please try again in a moment."
    assert notification.variant == "destructive"
    # Still on the upload screen; nothing visible is selected until a new pick
    assert session.machine.screen == "upload"


def test_new_selection_after_failed_synthesis_starts_fresh():
    client = poem_client(media=RuntimeError("Deadline exceeded"))
    new_photo = "data:image/png;base64,ZZZZ"

    async def scenario():
        session = StudioSession(make_context(client))
        session.select_photos([PHOTO_URI, PHOTO_URI_2, PHOTO_URI_3])
        session.open_description()
        await session.submit_prompt("a picnic")
        session.pop_notifications()
        return session

    session = asyncio.run(scenario())
    assert session.state is ViewState.ERROR

    assert session.select_photos([new_photo]) == [new_photo]
    assert session.state is ViewState.IMAGES_SELECTED
    assert session.notifications == []
    print("✓ Upload screen after a failure starts a new selection")


def test_single_photo_flow():
    client = poem_client()
    session = asyncio.run(ready_session(client))

    assert session.state is ViewState.POEM_READY
    assert session.poem.original == POEM
    assert session.poem.tone == "Joyful"
    assert session.machine.history[0][2] is ViewState.LOADING_POEM


def test_poem_failure_goes_to_error():
    client = poem_client(text={"PoemOutput": RuntimeError("503 Service Unavailable")})
    session = asyncio.run(ready_session(client))

    assert session.state is ViewState.ERROR
    assert session.poem is None
    assert session.pop_notifications()[0].title == "Error Generating Poem"
    assert session.notifications == []


def test_invalid_single_photo_stays_put():
    client = poem_client()
    session = StudioSession(make_context(client))
    asyncio.run(session.upload_single_photo("data:text/plain;base64,AAAA"))

    assert session.state is ViewState.INITIAL
    assert client.call_count == 0
    assert session.notifications[0].title == "Invalid photo"


# =============================================================================
# Photo selection limits
# =============================================================================

def test_select_photos_limits():
    session = StudioSession(make_context(poem_client()))
    kept = session.select_photos([PHOTO_URI, "garbage", PHOTO_URI_2, PHOTO_URI_3, PHOTO_URI])

    assert kept == [PHOTO_URI, PHOTO_URI_2, PHOTO_URI_3]
    assert [n.title for n in session.notifications] == ["Invalid photo", "Too many photos"]

    session.remove_photo(0)
    session.remove_photo(0)
    session.remove_photo(0)
    assert session.state is ViewState.INITIAL


def test_oversized_photo_rejected():
    session = StudioSession(make_context(poem_client(), max_photo_size_mb=0.000001))
    assert session.select_photos([PHOTO_URI]) == []
    assert session.state is ViewState.INITIAL
    assert "smaller than" in session.notifications[0].description


def test_submit_needs_description_step():
    session = StudioSession(make_context(poem_client()))
    session.select_photos([PHOTO_URI])
    with pytest.raises(InvalidTransition):
        asyncio.run(session.submit_prompt("too early"))


# =============================================================================
# Revision and secondary generations
# =============================================================================

def test_revision_starts_from_original():
    client = poem_client()

    async def scenario():
        session = await ready_session(client)
        await session.revise("Melancholic")
        await session.revise("Humorous")
        return session

    session = asyncio.run(scenario())

    assert session.state is ViewState.POEM_READY
    assert session.poem.text == "Revised: Humorous"
    assert session.poem.original == POEM
    for call in client.calls_to("generate_text")[1:]:
        assert POEM in call["parts"][0].text
        assert "Revised:" not in call["parts"][0].text


def test_revision_failure_keeps_poem():
    client = poem_client(text={"RevisionOutput": RuntimeError("boom")})

    async def scenario():
        session = await ready_session(client)
        await session.revise("Dramatic")
        return session

    session = asyncio.run(scenario())
    assert session.state is ViewState.POEM_READY
    assert session.poem.text == POEM
    assert session.notifications[0].description == "An unexpected error occurred while revising the poem. Please try again."


def test_audio_follows_voice_and_revisions():
    client = poem_client()

    async def scenario():
        session = await ready_session(client)
        # Voice change before the player is open does not narrate
        await session.change_voice("kore")
        assert client.calls_to("generate_media") == []

        await session.read_aloud()
        await session.change_voice("puck")
        await session.revise("Romantic")
        return session

    session = asyncio.run(scenario())

    narrations = client.calls_to("generate_media")
    assert [c["voice_name"] for c in narrations] == ["kore", "puck", "puck"]
    assert narrations[-1]["parts"][0].text == "Revised: Romantic"
    assert session.audio.status is SecondaryStatus.READY
    assert session.audio.data_uri.startswith("data:audio/wav;base64,")
    assert session.state is ViewState.POEM_READY


def test_secondary_failures_keep_top_state():
    client = poem_client(media=RuntimeError("Internal server error"), operations=[None])

    async def scenario():
        session = await ready_session(client)
        await asyncio.gather(session.read_aloud(), session.generate_artwork(), session.animate())
        return session

    session = asyncio.run(scenario())

    assert session.state is ViewState.POEM_READY
    assert session.audio.status is SecondaryStatus.FAILED
    assert session.artwork.status is SecondaryStatus.FAILED
    assert session.video.status is SecondaryStatus.FAILED
    assert sorted(n.title for n in session.notifications) == [
        "Error Generating Audio",
        "Error Generating Image",
        "Error Generating Video",
    ]


def test_artwork_and_video_ready():
    client = poem_client(media=SYNTHESIZED, operations=[pending(), finished()])

    async def scenario():
        session = await ready_session(client)
        await session.generate_artwork()
        await session.animate()
        return session

    session = asyncio.run(scenario())
    assert session.artwork.status is SecondaryStatus.READY
    assert session.artwork.data_uri.startswith("data:image/png;base64,")
    assert session.video.data_uri.startswith("data:video/mp4;base64,")
    assert client.calls_to("generate_media")[0]["parts"][2].text == f"Poem for inspiration: {POEM}"


def test_secondary_needs_a_poem():
    session = StudioSession(make_context(poem_client()))
    with pytest.raises(SessionError):
        asyncio.run(session.read_aloud())
    with pytest.raises(InvalidTransition):
        asyncio.run(session.revise("Joyful"))


# =============================================================================
# Stale results and reset
# =============================================================================

def test_reset_discards_in_flight_poem():
    async def scenario():
        client = GatedClient(text={"PoemOutput": {"poem": POEM}})
        session = StudioSession(make_context(client))
        task = asyncio.create_task(session.upload_single_photo(PHOTO_URI))
        await let_tasks_run()
        assert session.state is ViewState.LOADING_POEM

        session.reset()
        client.gate.set()
        return session, await task

    session, poem = asyncio.run(scenario())
    assert poem is None
    assert session.state is ViewState.INITIAL
    assert session.poem is None
    assert session.notifications == []


def test_newer_poem_wins_over_stale_one():
    async def scenario():
        client = GatedClient(text={"PoemOutput": {"poem": POEM}})
        session = StudioSession(make_context(client))
        stale = asyncio.create_task(session.upload_single_photo(PHOTO_URI))
        await let_tasks_run()
        session.reset()

        client.text["PoemOutput"] = {"poem": "Second poem"}
        fresh = asyncio.create_task(session.upload_single_photo(PHOTO_URI_2))
        await let_tasks_run()
        client.gate.set()
        return session, await stale, await fresh

    session, stale, fresh = asyncio.run(scenario())
    assert stale is None
    assert fresh.text == "Second poem"
    assert session.poem.text == "Second poem"
    assert session.state is ViewState.POEM_READY


def test_reset_discards_in_flight_audio():
    async def scenario():
        client = GatedClient(text={"PoemOutput": {"poem": POEM}})
        client.gate.set()
        session = await ready_session(client)

        client.gate.clear()
        task = asyncio.create_task(session.read_aloud())
        await let_tasks_run()
        assert session.audio.status is SecondaryStatus.LOADING

        session.reset()
        client.gate.set()
        await task
        return session

    session = asyncio.run(scenario())
    assert session.audio.status is SecondaryStatus.IDLE
    assert session.audio_ui_visible is False


# =============================================================================
# Downloads
# =============================================================================

def test_download_names():
    session = asyncio.run(ready_session(poem_client()))
    assert session.download_name("image") == "Sun_on_water__Light_.png"
    assert session.download_name("audio") == "Sun_on_water__Light_.wav"

    empty = StudioSession(make_context(poem_client()))
    assert empty.download_name("image") == "poem_art.png"
    assert empty.download_name("audio") == "poem_audio.wav"
    assert empty.download_name("video") == "poem_video.mp4"


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
