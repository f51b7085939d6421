"""Convenience imports for the texcorrect package."""

from .core import CorrectionPipeline, correct_document
from .exceptions import TexCorrectError

__all__ = [
    "CorrectionPipeline",
    "correct_document",
    "TexCorrectError",
]
