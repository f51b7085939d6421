"""Segmentation, correction and reassembly stages of the texcorrect pipeline."""

from .assembler import Assembler
from .batching import MAX_BATCH_CHARS, build_batches
from .classifier import CorrectableChunk, Preserved, Segment, segment_lines
from .client import CorrectionClient, CorrectionOracle, OracleState, PollingPolicy
from .markers import Regions, scan_markers
from .pipeline import CorrectionPipeline, correct_document
from .sentences import SentenceSegmenter

__all__ = [
    "Assembler",
    "MAX_BATCH_CHARS",
    "build_batches",
    "CorrectableChunk",
    "Preserved",
    "Segment",
    "segment_lines",
    "CorrectionClient",
    "CorrectionOracle",
    "OracleState",
    "PollingPolicy",
    "Regions",
    "scan_markers",
    "CorrectionPipeline",
    "correct_document",
    "SentenceSegmenter",
]
