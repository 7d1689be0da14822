"""
View state machine - which screen the studio shows.

States and the events that move between them are closed sets; every legal
move is a row in TRANSITIONS. Anything else raises InvalidTransition, so
e.g. revising a poem that does not exist cannot happen silently.

`error` looks exactly like `initial` (the failure itself is shown as a
notification); it exists so the last outcome is still inspectable.
"""

from enum import Enum


class ViewState(str, Enum):
    INITIAL = "initial"
    IMAGES_SELECTED = "images_selected"
    DESCRIBE_IMAGE = "describe_image"
    LOADING_IMAGE = "loading_image"
    LOADING_POEM = "loading_poem"
    POEM_READY = "poem_ready"
    ERROR = "error"


class ViewEvent(str, Enum):
    PHOTOS_SELECTED = "photos_selected"
    OPEN_DESCRIPTION = "open_description"
    CLOSE_DESCRIPTION = "close_description"
    SUBMIT_PROMPT = "submit_prompt"
    IMAGE_READY = "image_ready"
    SINGLE_PHOTO_UPLOADED = "single_photo_uploaded"
    POEM_READY = "poem_ready"
    POEM_REVISED = "poem_revised"
    PHOTOS_CLEARED = "photos_cleared"
    REQUEST_FAILED = "request_failed"
    RESET = "reset"


class InvalidTransition(Exception):
    """An event that is not allowed in the current state."""

    def __init__(self, state: ViewState, event: ViewEvent):
        super().__init__(f"Cannot handle '{event.value}' in state '{state.value}'")
        self.state = state
        self.event = event


S, E = ViewState, ViewEvent

# Entry screens accept a fresh selection or a single-photo upload
_ENTRY = {
    E.PHOTOS_SELECTED: S.IMAGES_SELECTED,
    E.SINGLE_PHOTO_UPLOADED: S.LOADING_POEM,
}

TRANSITIONS: dict[ViewState, dict[ViewEvent, ViewState]] = {
    S.INITIAL: dict(_ENTRY),
    S.ERROR: dict(_ENTRY),
    S.IMAGES_SELECTED: {
        E.PHOTOS_SELECTED: S.IMAGES_SELECTED,
        E.PHOTOS_CLEARED: S.INITIAL,
        E.OPEN_DESCRIPTION: S.DESCRIBE_IMAGE,
    },
    S.DESCRIBE_IMAGE: {
        E.CLOSE_DESCRIPTION: S.IMAGES_SELECTED,
        E.SUBMIT_PROMPT: S.LOADING_IMAGE,
    },
    S.LOADING_IMAGE: {
        E.IMAGE_READY: S.LOADING_POEM,
        E.REQUEST_FAILED: S.ERROR,
    },
    S.LOADING_POEM: {
        E.POEM_READY: S.POEM_READY,
        E.REQUEST_FAILED: S.ERROR,
    },
    S.POEM_READY: {
        E.POEM_REVISED: S.POEM_READY,
    },
}

# Reset is legal from anywhere
for _events in TRANSITIONS.values():
    _events[E.RESET] = S.INITIAL

# Screens rendered for each state; error shares the entry screen
SCREENS = {
    S.INITIAL: "upload",
    S.ERROR: "upload",
    S.IMAGES_SELECTED: "selection",
    S.DESCRIBE_IMAGE: "selection",
    S.LOADING_IMAGE: "loading",
    S.LOADING_POEM: "loading",
    S.POEM_READY: "poem",
}


def next_state(state: ViewState, event: ViewEvent) -> ViewState:
    """Look up the transition, raising InvalidTransition if there is none."""
    try:
        return TRANSITIONS[state][event]
    except KeyError:
        raise InvalidTransition(state, event) from None


class ViewStateMachine:
    """Current state plus the history of moves, for one session."""

    def __init__(self, state: ViewState = ViewState.INITIAL):
        self.state = state
        self.history: list[tuple[ViewState, ViewEvent, ViewState]] = []

    def can(self, event: ViewEvent) -> bool:
        return event in TRANSITIONS[self.state]

    def send(self, event: ViewEvent) -> ViewState:
        new_state = next_state(self.state, event)
        self.history.append((self.state, event, new_state))
        self.state = new_state
        return new_state

    @property
    def screen(self) -> str:
        return SCREENS[self.state]
