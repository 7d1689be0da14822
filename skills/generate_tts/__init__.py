from .generate_tts import TTSGenerator, TTSResult, audio_to_data_uri

__all__ = ["TTSGenerator", "TTSResult", "audio_to_data_uri"]
