from .understand_image import ImageUnderstanding, StyleAnalysis

__all__ = ["ImageUnderstanding", "StyleAnalysis"]
