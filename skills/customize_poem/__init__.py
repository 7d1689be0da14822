from .customize_poem import PoemReviser, RevisionOutput

__all__ = ["PoemReviser", "RevisionOutput"]
