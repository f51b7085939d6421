"""
Core texcorrect pipeline orchestrator.

``CorrectionPipeline`` is the façade used by the CLI. It scans the sentinel
regions, classifies the working region, sends every chunk through the
segmenter, the batch builder and the correction client one batch at a time,
and reassembles the document.
"""
from __future__ import annotations

from pathlib import Path
from typing import Final, List, Optional

from texcorrect.config.runtime import SegmentationConfig
from texcorrect.core.assembler import Assembler
from texcorrect.core.batching import build_batches
from texcorrect.core.classifier import CorrectableChunk, Preserved, Segment, segment_lines
from texcorrect.core.client import CorrectionClient
from texcorrect.core.logging_setup import get_logger
from texcorrect.core.markers import scan_markers
from texcorrect.core.sentences import SentenceSegmenter
from texcorrect.core.state import DocumentState, ProcessingStatus

logger: Final = get_logger(__name__)


class CorrectionPipeline:
    """Typed façade around scan, classify, correct and reassemble."""

    def __init__(
        self,
        client: CorrectionClient,
        cfg: Optional[SegmentationConfig] = None,
        segmenter: Optional[SentenceSegmenter] = None,
    ) -> None:
        self._cfg = cfg or SegmentationConfig()
        self._client = client
        self._segmenter = segmenter or SentenceSegmenter(self._cfg.language)
        self._assembler = Assembler()

    def correct_chunk(self, chunk: CorrectableChunk, state: DocumentState) -> str:
        """Correct one chunk batch by batch and join the results with spaces."""
        sentences = self._segmenter.split(chunk.text)
        batches = build_batches(sentences, self._cfg.max_batch_chars)
        state.sentences += len(sentences)
        state.batches += len(batches)
        logger.info("chunk_flushed", sentences=len(sentences), batches=len(batches))

        corrected = [self._client.correct(batch) for batch in batches]
        return " ".join(corrected)

    def run(self, text: str, source_path: Optional[Path] = None) -> DocumentState:
        state = DocumentState(source_path=source_path, status=ProcessingStatus.PROCESSING)
        trips_before = self._client.round_trips

        regions = scan_markers(text, self._cfg.start_marker, self._cfg.end_marker)
        state.has_working_region = regions.has_working
        if not regions.has_working:
            logger.info("no_working_region", start_marker=self._cfg.start_marker)
            state.add_log("No start marker found; document left unchanged.")
            state.output = text
            state.status = ProcessingStatus.COMPLETED
            return state

        segments = segment_lines(regions.working, flush_trailing=self._cfg.flush_trailing_chunk)
        resolved: List[Segment] = []
        for segment in segments:
            if isinstance(segment, Preserved):
                state.preserved_lines += 1
                resolved.append(segment)
                continue
            state.chunks += 1
            resolved.append(segment.resolve(self.correct_chunk(segment, state)))

        state.round_trips = self._client.round_trips - trips_before
        state.output = self._assembler.assemble(regions.preamble, resolved, regions.trailer)
        state.add_log(
            f"Corrected {state.chunks} chunks in {state.batches} batches "
            f"({state.preserved_lines} lines preserved)."
        )
        state.status = ProcessingStatus.COMPLETED
        return state


def correct_document(
    text: str,
    client: CorrectionClient,
    cfg: Optional[SegmentationConfig] = None,
) -> str:
    """Run the pipeline over ``text`` and return the corrected document."""
    return CorrectionPipeline(client, cfg).run(text).output
