"""Capability - the kinds of generation request the app can make."""

from enum import Enum


class Capability(str, Enum):
    """One value per generation request type (and per action)."""

    POEM = "poem"
    REVISION = "revision"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    VOICE_TEST = "voice_test"
