from .generate_poem import PoemGenerator, PoemOutput

__all__ = ["PoemGenerator", "PoemOutput"]
