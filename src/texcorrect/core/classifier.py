"""
Line classification and chunk accumulation for the working region.

The classifier is a fold over the working-region lines. Each step takes the
current ``ClassifierState`` (environment stack plus pending free-text lines)
and one line, and returns the next state together with the segments that the
line releases. Nothing is shared between calls, so the same lines always
produce the same segments.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from texcorrect.core.logging_setup import get_logger

LOGGER = get_logger(__name__)

COMMENT_TOKEN = "%"
COMMAND_TOKEN = "\\"
BEGIN_TOKEN = "\\begin{"
END_TOKEN = "\\end{"
ENV_NAME_RE = re.compile(r"\{([^}]*)\}?")


class LineClass(str, Enum):
    PRESERVED = "PRESERVED"
    FREE_TEXT = "FREE_TEXT"


@dataclass(frozen=True)
class Preserved:
    """A working-region line copied to the output untouched."""
    line: str


@dataclass(frozen=True)
class CorrectableChunk:
    """A run of consecutive free-text lines, newline-terminated."""
    text: str
    corrected: Optional[str] = None

    def resolve(self, corrected: str) -> "CorrectableChunk":
        return replace(self, corrected=corrected)


Segment = Union[Preserved, CorrectableChunk]


@dataclass(frozen=True)
class EnvironmentStack:
    names: Tuple[str, ...] = ()

    def push(self, name: str) -> "EnvironmentStack":
        return EnvironmentStack(self.names + (name,))

    def remove(self, name: str) -> "EnvironmentStack":
        # First equal entry from the bottom, not necessarily the top.
        # An unmatched name leaves the stack unchanged.
        if name not in self.names:
            return self
        index = self.names.index(name)
        return EnvironmentStack(self.names[:index] + self.names[index + 1:])

    @property
    def depth(self) -> int:
        return len(self.names)

    def __bool__(self) -> bool:
        return bool(self.names)


@dataclass(frozen=True)
class ClassifierState:
    stack: EnvironmentStack = field(default_factory=EnvironmentStack)
    pending: Tuple[str, ...] = ()


def environment_name(line: str) -> str:
    """Name between the first ``{`` and the following ``}``."""
    match = ENV_NAME_RE.search(line)
    return match.group(1) if match else ""


def update_stack(stack: EnvironmentStack, line: str) -> EnvironmentStack:
    if line.startswith(BEGIN_TOKEN):
        return stack.push(environment_name(line))
    if line.startswith(END_TOKEN):
        return stack.remove(environment_name(line))
    return stack


def classify_line(stack: EnvironmentStack, line: str) -> Tuple[EnvironmentStack, LineClass]:
    """Apply the line's own begin/end token, then classify against the updated stack."""
    stack = update_stack(stack, line)
    if line.startswith(COMMENT_TOKEN) or line.startswith(COMMAND_TOKEN) or stack:
        return stack, LineClass.PRESERVED
    return stack, LineClass.FREE_TEXT


def _pending_chunk(pending: Tuple[str, ...]) -> CorrectableChunk:
    return CorrectableChunk("".join(line + "\n" for line in pending))


def step(state: ClassifierState, line: str) -> Tuple[ClassifierState, List[Segment]]:
    stack, kind = classify_line(state.stack, line)
    if kind is LineClass.FREE_TEXT:
        return ClassifierState(stack, state.pending + (line,)), []

    released: List[Segment] = []
    if state.pending:
        released.append(_pending_chunk(state.pending))
    released.append(Preserved(line))
    return ClassifierState(stack, ()), released


def segment_lines(lines: Iterable[str], flush_trailing: bool = True) -> List[Segment]:
    """
    Turn working-region lines into an ordered list of segments.

    Free text is only released by the next preserved line. ``flush_trailing``
    decides what happens to free text left pending at the end of the region:
    it becomes a final chunk, or it is dropped with a warning.
    """
    state = ClassifierState()
    segments: List[Segment] = []
    for line in lines:
        state, released = step(state, line)
        segments.extend(released)

    if state.pending:
        if flush_trailing:
            segments.append(_pending_chunk(state.pending))
        else:
            LOGGER.warning("trailing_text_dropped", lines=len(state.pending))

    if state.stack:
        LOGGER.debug("unclosed_environments", names=list(state.stack.names))
    return segments
