from .generate_image import ImageGenerator

__all__ = ["ImageGenerator"]
