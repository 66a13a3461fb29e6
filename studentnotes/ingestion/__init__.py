"""Text preprocessing modules."""

from .preprocessor import TextPreprocessor

__all__ = ["TextPreprocessor"]
