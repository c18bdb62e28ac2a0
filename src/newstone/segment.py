"""Split documents into sentences and keep those mentioning the study topic."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from newstone.models import Document, Sentence

logger = logging.getLogger(__name__)

# A sentence ends at ".", "?" or "!" followed by whitespace.
_SENTENCE_END_RE = re.compile(r"(?<=[.?!])\s+")


class MalformedDocumentError(ValueError):
    """Raised when a document has no usable text body."""

    def __init__(self, doc_id: str, reason: str) -> None:
        super().__init__(f"{doc_id}: {reason}")
        self.doc_id = doc_id
        self.reason = reason


def split_sentences(text: str) -> list[str]:
    """Split *text* into sentences after collapsing runs of whitespace.

    Text without sentence-ending punctuation comes back as one sentence.
    """
    collapsed = " ".join(text.split())
    if not collapsed:
        return []
    return _SENTENCE_END_RE.split(collapsed)


def segment_document(doc: Document) -> Iterator[Sentence]:
    """Lazily yield the sentences of *doc*, numbered from 1."""
    if not doc.text or not doc.text.strip():
        raise MalformedDocumentError(doc.doc_id, "empty text body")
    for position, text in enumerate(split_sentences(doc.text), start=1):
        yield Sentence(
            doc_id=doc.doc_id,
            position=position,
            text=text,
            metadata=dict(doc.metadata),
        )


class KeywordFilter:
    """Case-insensitive keyword predicate.

    A keyword matches at the start of a word, so ``refugee`` also matches
    "Refugees" but not "nonrefugee".
    """

    def __init__(self, keywords: Iterable[str]) -> None:
        cleaned = sorted({kw.strip().lower() for kw in keywords if kw and kw.strip()})
        if not cleaned:
            raise ValueError("KeywordFilter needs at least one keyword.")
        self.keywords: tuple[str, ...] = tuple(cleaned)
        # Longest first so alternation prefers the most specific keyword
        alternation = "|".join(
            re.escape(kw) for kw in sorted(cleaned, key=len, reverse=True)
        )
        self._pattern = re.compile(rf"\b(?:{alternation})", re.IGNORECASE)

    def __call__(self, text: str) -> bool:
        return self._pattern.search(text) is not None

    def __repr__(self) -> str:
        return f"KeywordFilter({list(self.keywords)!r})"


def filter_sentences(
    sentences: Iterable[Sentence], predicate: KeywordFilter
) -> Iterator[Sentence]:
    """Yield only sentences whose text satisfies *predicate*."""
    return (s for s in sentences if predicate(s.text))


def relevant_sentences(doc: Document, predicate: KeywordFilter) -> list[Sentence]:
    """Segment *doc* and return the sentences that mention a keyword."""
    kept = list(filter_sentences(segment_document(doc), predicate))
    logger.debug("Document %s: %d relevant sentences", doc.doc_id, len(kept))
    return kept
