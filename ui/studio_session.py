"""
Studio session - the client-side controller of one Photo Poet visit.

Drives the ViewStateMachine from user events and from the results of the
actions it calls. Holds the only state that lives longer than a request:
selected photos, the current poem and the secondary generations (audio,
artwork, video) shown next to it. Nothing survives reset().

Requests cannot be cancelled. Instead each in-flight request captures a
token; reset() or a newer request of the same kind makes older tokens
stale, and stale results are dropped on arrival.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from agent.actions import (
    ActionContext,
    customize_poem_action,
    generate_image_action,
    generate_poem_action,
    generate_video_action,
    text_to_speech_action,
)
from agent.errors import ValidationError
from models.media import PhotoAsset
from models.poem import PoemRecord
from models.requests import (
    CustomizePoemInput,
    GenerateImageInput,
    GeneratePoemInput,
    GenerateVideoInput,
    TextToSpeechInput,
)
from ui.view_state import ViewEvent, ViewState, ViewStateMachine, next_state

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """A user action that makes no sense right now (e.g. no poem yet)."""


@dataclass
class Notification:
    """A transient toast."""
    title: str
    description: str
    variant: str = "destructive"


class SecondaryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass
class SecondaryState:
    """Local sub-state of an on-demand generation next to the poem."""
    status: SecondaryStatus = SecondaryStatus.IDLE
    data_uri: Optional[str] = None
    error: Optional[str] = None


DOWNLOAD_FORMATS = {
    "image": ("poem_art", "png"),
    "audio": ("poem_audio", "wav"),
    "video": ("poem_video", "mp4"),
}


class StudioSession:
    """One user's path from photos to a finished poem and its extras."""

    def __init__(self, context: ActionContext):
        self.context = context
        self.machine = ViewStateMachine()
        self.notifications: list[Notification] = []

        self._epoch = 0
        self._counters = {"main": 0, "revision": 0, "audio": 0, "image": 0, "video": 0}
        self._clear()

    def _clear(self):
        self.selected_photos: list[str] = []
        self.photo: Optional[str] = None
        self.poem: Optional[PoemRecord] = None
        self.voice: str = self.context.settings.default_voice
        self.audio_ui_visible = False
        self.audio = SecondaryState()
        self.artwork = SecondaryState()
        self.video = SecondaryState()

    @property
    def state(self) -> ViewState:
        return self.machine.state

    # =========================================================================
    # Tokens and notifications
    # =========================================================================

    def _begin(self, kind: str) -> tuple[int, int]:
        self._counters[kind] += 1
        return self._epoch, self._counters[kind]

    def _is_current(self, kind: str, token: tuple[int, int]) -> bool:
        current = token == (self._epoch, self._counters[kind])
        if not current:
            logger.info(f"[Session] Dropping stale {kind} result")
        return current

    def _notify(self, title: str, description: str):
        logger.info(f"[Session] {title}: {description}")
        self.notifications.append(Notification(title=title, description=description))

    def _fail(self, title: str, description: str):
        self._notify(title, description)
        self.machine.send(ViewEvent.REQUEST_FAILED)

    def pop_notifications(self) -> list[Notification]:
        notifications, self.notifications = self.notifications, []
        return notifications

    # =========================================================================
    # Photo selection
    # =========================================================================

    def _check_photo(self, data_uri: str) -> Optional[str]:
        """Return a reason the photo is rejected, or None."""
        try:
            photo = PhotoAsset.from_data_uri(data_uri)
        except ValidationError as e:
            return str(e)
        max_bytes = self.context.settings.max_photo_size_mb * 1024 * 1024
        if photo.size_bytes > max_bytes:
            return f"Each photo must be smaller than {self.context.settings.max_photo_size_mb}MB."
        return None

    def select_photos(self, data_uris: list[str]) -> list[str]:
        """Add photos to the selection, skipping invalid or excess ones.

        From the upload screen (``initial`` or ``error``) this starts a new
        selection; photos left over from a failed synthesis are dropped.
        """
        next_state(self.state, ViewEvent.PHOTOS_SELECTED)
        if self.state in (ViewState.INITIAL, ViewState.ERROR):
            self.selected_photos = []

        max_photos = self.context.settings.max_photos
        for data_uri in data_uris:
            if len(self.selected_photos) >= max_photos:
                self._notify("Too many photos", f"You can select up to {max_photos} photos.")
                break
            reason = self._check_photo(data_uri)
            if reason:
                self._notify("Invalid photo", reason)
                continue
            self.selected_photos.append(data_uri)

        if self.selected_photos:
            self.machine.send(ViewEvent.PHOTOS_SELECTED)
        return list(self.selected_photos)

    def remove_photo(self, index: int):
        if self.state is not ViewState.IMAGES_SELECTED:
            raise SessionError("No photos are selected.")
        del self.selected_photos[index]
        if not self.selected_photos:
            self.machine.send(ViewEvent.PHOTOS_CLEARED)

    def open_description(self):
        self.machine.send(ViewEvent.OPEN_DESCRIPTION)

    def close_description(self):
        self.machine.send(ViewEvent.CLOSE_DESCRIPTION)

    # =========================================================================
    # Main flows
    # =========================================================================

    async def _write_poem(self, token, tone: str = None, style: str = None) -> Optional[PoemRecord]:
        result = await generate_poem_action(
            GeneratePoemInput(photo_data_uri=self.photo, tone=tone, style=style),
            self.context,
        )
        if not self._is_current("main", token):
            return None
        if not result.ok:
            self._fail("Error Generating Poem", result.error)
            return None

        self.poem = PoemRecord.create(
            result.poem,
            tone=tone or self.context.settings.default_tone,
            style=style or self.context.settings.default_style,
        )
        self.machine.send(ViewEvent.POEM_READY)
        return self.poem

    async def submit_prompt(
        self,
        prompt: str,
        aspect_ratio: str = None,
        tone: str = None,
        style: str = None,
    ) -> Optional[PoemRecord]:
        """Synthesize an image from the selected photos, then write its poem."""
        self.machine.send(ViewEvent.SUBMIT_PROMPT)
        token = self._begin("main")

        result = await generate_image_action(
            GenerateImageInput(
                photo_data_uris=list(self.selected_photos),
                prompt=prompt,
                aspect_ratio=aspect_ratio or self.context.settings.default_aspect_ratio,
            ),
            self.context,
        )
        if not self._is_current("main", token):
            return None
        if not result.ok:
            self._fail("Error Generating Image", result.error)
            return None

        self.photo = result.image_data_uri
        self.machine.send(ViewEvent.IMAGE_READY)
        return await self._write_poem(token, tone, style)

    async def upload_single_photo(
        self,
        data_uri: str,
        tone: str = None,
        style: str = None,
    ) -> Optional[PoemRecord]:
        """Write a poem straight from one uploaded photo."""
        next_state(self.state, ViewEvent.SINGLE_PHOTO_UPLOADED)
        reason = self._check_photo(data_uri)
        if reason:
            self._notify("Invalid photo", reason)
            return None

        self.machine.send(ViewEvent.SINGLE_PHOTO_UPLOADED)
        token = self._begin("main")
        self.selected_photos = []
        self.photo = data_uri
        return await self._write_poem(token, tone, style)

    async def revise(self, tone: str) -> Optional[PoemRecord]:
        """Re-tone the poem, always starting from the original text."""
        next_state(self.state, ViewEvent.POEM_REVISED)
        token = self._begin("revision")

        result = await customize_poem_action(
            CustomizePoemInput(original_poem=self.poem.original, tone=tone),
            self.context,
        )
        if not self._is_current("revision", token):
            return None
        if not result.ok:
            self._notify("Error Revising Poem", result.error)
            return None

        self.poem = self.poem.revised(result.revised_poem, tone)
        self.machine.send(ViewEvent.POEM_REVISED)
        if self.audio_ui_visible:
            await self._generate_audio()
        return self.poem

    # =========================================================================
    # Secondary generations
    # =========================================================================

    def _require_poem(self):
        if self.state is not ViewState.POEM_READY or self.poem is None:
            raise SessionError("There is no poem yet.")

    async def _generate_audio(self):
        token = self._begin("audio")
        self.audio = SecondaryState(status=SecondaryStatus.LOADING)

        result = await text_to_speech_action(
            TextToSpeechInput(text=self.poem.text, voice_name=self.voice),
            self.context,
        )
        if not self._is_current("audio", token):
            return
        if not result.ok:
            self.audio = SecondaryState(status=SecondaryStatus.FAILED, error=result.error)
            self._notify("Error Generating Audio", result.error)
            return
        self.audio = SecondaryState(status=SecondaryStatus.READY, data_uri=result.audio_data_uri)

    async def read_aloud(self, voice: str = None) -> SecondaryState:
        self._require_poem()
        if voice:
            self.voice = voice
        self.audio_ui_visible = True
        await self._generate_audio()
        return self.audio

    async def change_voice(self, voice: str) -> SecondaryState:
        """Pick another voice; re-narrates only if the audio player is open."""
        self.voice = voice
        if self.audio_ui_visible and self.poem is not None:
            await self._generate_audio()
        return self.audio

    async def generate_artwork(self, aspect_ratio: str = None) -> SecondaryState:
        self._require_poem()
        token = self._begin("image")
        self.artwork = SecondaryState(status=SecondaryStatus.LOADING)

        result = await generate_image_action(
            GenerateImageInput(poem=self.poem.text, photo_data_uri=self.photo, aspect_ratio=aspect_ratio),
            self.context,
        )
        if not self._is_current("image", token):
            return self.artwork
        if not result.ok:
            self.artwork = SecondaryState(status=SecondaryStatus.FAILED, error=result.error)
            self._notify("Error Generating Image", result.error)
        else:
            self.artwork = SecondaryState(status=SecondaryStatus.READY, data_uri=result.image_data_uri)
        return self.artwork

    async def animate(self) -> SecondaryState:
        """Turn the poem's photo into a short clip."""
        self._require_poem()
        token = self._begin("video")
        self.video = SecondaryState(status=SecondaryStatus.LOADING)

        result = await generate_video_action(GenerateVideoInput(photo_data_uri=self.photo), self.context)
        if not self._is_current("video", token):
            return self.video
        if not result.ok:
            self.video = SecondaryState(status=SecondaryStatus.FAILED, error=result.error)
            self._notify("Error Generating Video", result.error)
        else:
            self.video = SecondaryState(status=SecondaryStatus.READY, data_uri=result.video_data_uri)
        return self.video

    # =========================================================================
    # Misc
    # =========================================================================

    def reset(self):
        """Back to the upload screen; in-flight results will be dropped."""
        self._epoch += 1
        self._clear()
        self.machine.send(ViewEvent.RESET)

    def download_name(self, kind: str) -> str:
        """File name for a download: the poem's first 20 characters, made safe."""
        fallback, extension = DOWNLOAD_FORMATS[kind]
        text = self.poem.text if self.poem else ""
        safe_name = re.sub(r"[^a-zA-Z0-9]", "_", text[:20]) or fallback
        return f"{safe_name}.{extension}"
