"""Split a document into preamble, working region and trailer around the sentinel lines."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

from texcorrect.core.logging_setup import get_logger

LOGGER = get_logger(__name__)

LINE_RE = re.compile(r"[^\n]*\n|[^\n]+\Z")
START_MARKER = "%CORRECT_START"
END_MARKER = "%CORRECT_END"


@dataclass(frozen=True)
class Regions:
    preamble: str
    working: List[str] = field(default_factory=list)  # lines without line endings
    trailer: str = ""
    has_working: bool = False


def split_lines(text: str) -> List[str]:
    """Split on \\n only, keeping the endings. Form feeds and Unicode separators stay inside the line."""
    return LINE_RE.findall(text)


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def scan_markers(
    text: str,
    start_marker: str = START_MARKER,
    end_marker: str = END_MARKER,
) -> Regions:
    """
    Scan the document once and route every line to its region.

    Both sentinel lines are dropped. Without a start sentinel the whole text is
    preamble; without an end sentinel the working region runs to the end of the
    document. An end sentinel seen before the start sentinel is ordinary preamble.
    """
    preamble: List[str] = []
    working: List[str] = []
    trailer: List[str] = []

    has_started = False
    has_ended = False
    for line in split_lines(text):
        bare = _strip_eol(line)
        if not has_started:
            if bare == start_marker:
                has_started = True
                continue
            preamble.append(line)
        elif not has_ended:
            if bare == end_marker:
                has_ended = True
                continue
            working.append(bare)
        else:
            trailer.append(line)

    LOGGER.debug(
        "region_scan",
        preamble_lines=len(preamble),
        working_lines=len(working),
        trailer_lines=len(trailer),
        started=has_started,
        ended=has_ended,
    )
    return Regions(
        preamble="".join(preamble),
        working=working,
        trailer="".join(trailer),
        has_working=has_started,
    )
