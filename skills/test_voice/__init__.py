from .test_voice import VoiceProbe

__all__ = ["VoiceProbe"]
