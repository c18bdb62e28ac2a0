"""Lexicon scoring for normalised sentences."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from newstone.lexicon import Lexicon, Polarity
from newstone.models import PolarityCounts, ScoredSentence, Sentence
from newstone.normalize import is_negated, strip_negation

logger = logging.getLogger(__name__)


def signed_score(counts: PolarityCounts) -> float:
    """Net polarity: negated terms count toward the opposite side.

    "not good" lowers the score and "not bad" raises it.
    """
    return counts.effective_positive - counts.effective_negative


class Scorer:
    """Count lexicon matches in normalised text.

    Tokens are split on whitespace. Stop words are dropped before lookup.
    A token the normaliser tagged as negated is looked up without its tag and
    lands in the matching ``neg_*`` bucket. Unknown tokens contribute nothing.
    """

    def __init__(self, lexicon: Lexicon, stopwords: Iterable[str] = ()) -> None:
        self._lexicon = lexicon
        self._stopwords = frozenset(w.lower() for w in stopwords)

    def tokens(self, normalized: str) -> list[str]:
        return [
            t for t in normalized.split()
            if strip_negation(t).lower() not in self._stopwords
        ]

    def count(self, normalized: str) -> tuple[PolarityCounts, int]:
        """Return bucketed matches and the number of tokens considered."""
        buckets: dict[Polarity, float] = {p: 0.0 for p in Polarity}
        tokens = self.tokens(normalized)
        for token in tokens:
            if is_negated(token):
                entry = self._lexicon.lookup_negated(strip_negation(token))
            else:
                entry = self._lexicon.lookup(token)
            if entry is not None:
                buckets[entry.polarity] += entry.weight

        counts = PolarityCounts(
            positive=buckets[Polarity.POSITIVE],
            negative=buckets[Polarity.NEGATIVE],
            neg_positive=buckets[Polarity.NEG_POSITIVE],
            neg_negative=buckets[Polarity.NEG_NEGATIVE],
        )
        return counts, len(tokens)

    def score_sentence(self, sentence: Sentence, normalized: str) -> ScoredSentence:
        counts, total_words = self.count(normalized)
        return ScoredSentence(
            sentence=sentence,
            normalized=normalized,
            counts=counts,
            total_words=total_words,
            score=signed_score(counts),
        )
