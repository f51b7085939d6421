from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


class ProcessingStatus(str, Enum):
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"


class DocumentState(BaseModel):
    """
    Outcome of one correction run, passed back to the caller.
    """

    source_path: Optional[Path] = None

    # Region scan
    has_working_region: bool = False
    preserved_lines: int = 0

    # Correction counters
    chunks: int = 0
    sentences: int = 0
    batches: int = 0
    round_trips: int = 0

    # The reassembled document
    output: str = ""

    # Status Tracking
    status: ProcessingStatus = ProcessingStatus.PROCESSING
    processing_log: List[str] = Field(default_factory=list)

    def add_log(self, message: str):
        self.processing_log.append(message)
