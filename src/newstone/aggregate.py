"""Roll sentence scores up to documents and groups (e.g. countries)."""

from __future__ import annotations

import logging
import math
import statistics
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

from newstone.models import GroupAggregate, PolarityCounts, ScoredDocument, ScoredSentence

logger = logging.getLogger(__name__)

DOCUMENT_MEASURES: tuple[str, ...] = (
    "mean_score", "tone_index", "proportion_positive", "proportion_negative",
)


def tone_index(counts: PolarityCounts) -> float | None:
    """(P − N) / (P + N) over the folded buckets; ``None`` without polarity terms.

    P counts positive and negated-negative terms, N counts negative and
    negated-positive terms.
    """
    pos = counts.effective_positive
    neg = counts.effective_negative
    if pos + neg == 0:
        return None
    return (pos - neg) / (pos + neg)


def std_error(values: list[float]) -> float | None:
    """Sample standard deviation over √n; undefined (``None``) for n < 2."""
    if len(values) < 2:
        return None
    return statistics.stdev(values) / math.sqrt(len(values))


def group_value(
    metadata: Mapping[str, Any],
    group_key: str,
    labels: Mapping[str, str] | None = None,
) -> str:
    """Return the group a record belongs to, relabelled through *labels*.

    Raises ``KeyError`` when the grouping field is missing or empty.
    """
    raw = metadata.get(group_key)
    if raw is None or str(raw).strip() == "":
        raise KeyError(group_key)
    value = str(raw).strip()
    if labels:
        return labels.get(value, value)
    return value


def _proportion(part: float, total_words: int) -> float | None:
    return part / total_words if total_words else None


def aggregate_documents(
    scored: Iterable[ScoredSentence],
    group_key: str,
    labels: Mapping[str, str] | None = None,
) -> list[ScoredDocument]:
    """One record per document that kept at least one sentence.

    Documents come back in order of first appearance.
    """
    by_doc: dict[str, list[ScoredSentence]] = defaultdict(list)
    for item in scored:
        by_doc[item.doc_id].append(item)

    documents: list[ScoredDocument] = []
    for doc_id, items in by_doc.items():
        counts = PolarityCounts()
        for item in items:
            counts = counts + item.counts
        total_words = sum(item.total_words for item in items)
        documents.append(
            ScoredDocument(
                doc_id=doc_id,
                group=group_value(items[0].sentence.metadata, group_key, labels),
                mean_score=statistics.fmean(item.score for item in items),
                n_sentences=len(items),
                counts=counts,
                total_words=total_words,
                tone_index=tone_index(counts),
                proportion_positive=_proportion(counts.effective_positive, total_words),
                proportion_negative=_proportion(counts.effective_negative, total_words),
            )
        )

    logger.info("Aggregated %d documents", len(documents))
    return documents


def summarize(group: str, measure: str, values: list[float]) -> GroupAggregate:
    return GroupAggregate(
        group=group,
        measure=measure,
        mean=statistics.fmean(values) if values else None,
        std_error=std_error(values),
        n=len(values),
    )


def _collect(pairs: Iterable[tuple[str, float | None]], measure: str) -> list[GroupAggregate]:
    buckets: dict[str, list[float]] = defaultdict(list)
    undefined = 0
    for group, value in pairs:
        if value is None or (isinstance(value, float) and math.isnan(value)):
            buckets.setdefault(group, [])
            undefined += 1
            continue
        buckets[group].append(float(value))
    if undefined:
        logger.info("Left out %d records with undefined %s", undefined, measure)
    return [summarize(group, measure, buckets[group]) for group in sorted(buckets)]


def aggregate_groups(
    documents: Iterable[ScoredDocument],
    measure: str = "mean_score",
) -> list[GroupAggregate]:
    """Mean, standard error and n of *measure* per document group.

    Documents whose measure is undefined are left out of the statistics; a
    group with no defined value still appears, with ``mean=None`` and n = 0.
    """
    if measure not in DOCUMENT_MEASURES:
        raise ValueError(f"Unknown document measure {measure!r}; expected one of {DOCUMENT_MEASURES}")
    aggregates = _collect(((d.group, getattr(d, measure)) for d in documents), measure)
    logger.info("Aggregated %s into %d groups", measure, len(aggregates))
    return aggregates


def aggregate_sentence_groups(
    scored: Iterable[ScoredSentence],
    group_key: str,
    labels: Mapping[str, str] | None = None,
) -> list[GroupAggregate]:
    """Mean, standard error and n of sentence scores per group."""
    pairs = (
        (group_value(s.sentence.metadata, group_key, labels), s.score) for s in scored
    )
    return _collect(pairs, "score")
