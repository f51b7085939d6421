"""Sentence segmentation trained on the chunk it splits (unsupervised Punkt)."""
from __future__ import annotations

from typing import Dict, FrozenSet, List

from nltk.tokenize.punkt import PunktSentenceTokenizer, PunktTrainer

from texcorrect.core.logging_setup import get_logger

LOGGER = get_logger(__name__)

# Punkt stores abbreviation types lower-cased and without the final period.
SEED_ABBREVIATIONS: Dict[str, FrozenSet[str]] = {
    "german": frozenset({
        "abb", "abs", "bspw", "bzw", "ca", "d.h", "etc", "evtl", "ggf",
        "inkl", "kap", "nr", "s", "sog", "tab", "u.a", "usw", "vgl", "z.b",
    }),
    "english": frozenset({
        "al", "cf", "e.g", "eq", "etc", "fig", "i.e", "no", "resp", "sec",
        "vs",
    }),
}


class SentenceSegmenter:
    """Splits a chunk into sentences with a Punkt model trained on that chunk.

    No external corpus is consulted. The only fixed knowledge is the seed
    abbreviation list of the configured language, so identical input always
    yields identical sentences.
    """

    def __init__(self, language: str = "german") -> None:
        if language not in SEED_ABBREVIATIONS:
            raise ValueError(f"Unsupported language: {language}")
        self.language = language

    def _train(self, text: str) -> PunktSentenceTokenizer:
        trainer = PunktTrainer()
        trainer.train(text, finalize=True)
        params = trainer.get_params()
        params.abbrev_types.update(SEED_ABBREVIATIONS[self.language])
        return PunktSentenceTokenizer(params)

    def split(self, text: str) -> List[str]:
        if not text.strip():
            return []
        tokenizer = self._train(text)
        sentences = tokenizer.tokenize(text)
        LOGGER.debug("sentences_segmented", count=len(sentences), chars=len(text))
        return sentences
