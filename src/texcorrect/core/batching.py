"""Greedy packing of sentences into size-bounded batches."""
from __future__ import annotations

from typing import Iterable, List

MAX_BATCH_CHARS = 2000


def build_batches(sentences: Iterable[str], max_chars: int = MAX_BATCH_CHARS) -> List[str]:
    """
    Merge consecutive sentences into space-joined batches of at most ``max_chars``.

    The joining space counts towards the budget. A sentence is never split; one
    that alone exceeds the budget becomes its own oversized batch.
    """
    batches: List[str] = []
    current = ""
    for sentence in sentences:
        needed = len(sentence) + (1 if current else 0)
        if current and len(current) + needed > max_chars:
            batches.append(current)
            current = sentence
            continue
        current = f"{current} {sentence}" if current else sentence

    if current:
        batches.append(current)
    return batches
