"""Pipeline orchestration: wires segment → filter → normalise → score → aggregate."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from newstone import config
from newstone.aggregate import aggregate_documents, aggregate_groups, group_value
from newstone.corpus import load_records, record_id, to_document
from newstone.lexicon import Lexicon, load_lexicon, load_stopwords
from newstone.models import PipelineResult, ScoredSentence, SkippedDocument
from newstone.normalize import TextNormalizer
from newstone.score import Scorer
from newstone.segment import KeywordFilter, MalformedDocumentError, relevant_sentences
from newstone.study import Study

logger = logging.getLogger(__name__)


def setup_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def score_corpus(
    records: Iterable[Mapping[str, Any]],
    *,
    lexicon: Lexicon,
    keywords: Iterable[str],
    group_key: str = "country",
    group_labels: Mapping[str, str] | None = None,
    stopwords: Iterable[str] = (),
    negation_window: int = 1,
    measure: str = "mean_score",
    id_field: str = "doc_id",
    text_field: str = "text",
) -> PipelineResult:
    """Score every record and aggregate per document and per group.

    A record that cannot be turned into a usable document (no id, empty
    text, no group value, duplicate id) is skipped and listed in
    ``PipelineResult.skipped``; the rest of the batch carries on.
    """
    predicate = KeywordFilter(keywords)
    normalizer = TextNormalizer.for_lexicon(lexicon, negation_window=negation_window)
    scorer = Scorer(lexicon, stopwords=stopwords)

    scored: list[ScoredSentence] = []
    skipped: list[SkippedDocument] = []
    seen: set[str] = set()
    n_records = 0
    n_without_match = 0

    for record in records:
        n_records += 1
        doc_id = record_id(record, id_field)

        # ── 1. Validate ──────────────────────────────────────────────
        try:
            doc = to_document(record, id_field=id_field, text_field=text_field)
            group_value(doc.metadata, group_key, group_labels)
        except ValidationError as exc:
            skipped.append(_skip(doc_id, _invalid_reason(doc_id, id_field, exc)))
            continue
        except KeyError:
            skipped.append(_skip(doc_id, f"missing group field {group_key!r}"))
            continue
        if doc.doc_id in seen:
            skipped.append(_skip(doc_id, "duplicate doc_id"))
            continue

        # ── 2. Segment + keyword filter ──────────────────────────────
        try:
            sentences = relevant_sentences(doc, predicate)
        except MalformedDocumentError as exc:
            skipped.append(_skip(doc_id, exc.reason))
            continue
        seen.add(doc.doc_id)
        if not sentences:
            n_without_match += 1
            continue

        # ── 3. Normalise + score ─────────────────────────────────────
        for sentence in sentences:
            scored.append(scorer.score_sentence(sentence, normalizer(sentence.text)))

    logger.info(
        "Scored %d sentences from %d records (%d without keyword match, %d skipped)",
        len(scored), n_records, n_without_match, len(skipped),
    )

    # ── 4. Aggregate ────────────────────────────────────────────────────
    documents = aggregate_documents(scored, group_key, group_labels)
    groups = aggregate_groups(documents, measure=measure)

    return PipelineResult(
        sentences=scored,
        documents=documents,
        groups=groups,
        skipped=skipped,
    )


def run_study(study: Study, corpus_path: Path, measure: str | None = None) -> PipelineResult:
    """Load the study's lexicon, then score the corpus at *corpus_path*.

    Lexicon problems raise ``LexiconLoadError`` before any document is read.
    """
    logger.info("=== newstone start [study=%s] ===", study.name)

    lexicon = load_lexicon(study.lexicon)
    stopwords = load_stopwords(study.stopwords) if study.stopwords else frozenset()
    records = load_records(corpus_path)

    result = score_corpus(
        records,
        lexicon=lexicon,
        keywords=study.keywords,
        group_key=study.group_key,
        group_labels=study.group_labels,
        stopwords=stopwords,
        negation_window=study.negation_window,
        measure=measure or study.measure,
        id_field=study.id_field,
        text_field=study.text_field,
    )

    logger.info(
        "=== newstone done [study=%s]: %d documents, %d groups ===",
        study.name, len(result.documents), len(result.groups),
    )
    return result


def _skip(doc_id: str, reason: str) -> SkippedDocument:
    logger.warning("Skipping document %s: %s", doc_id or "<no id>", reason)
    return SkippedDocument(doc_id=doc_id, reason=reason)


def _invalid_reason(doc_id: str, id_field: str, exc: ValidationError) -> str:
    if not doc_id.strip():
        return f"missing {id_field}"
    return "invalid record: " + "; ".join(err["msg"] for err in exc.errors())
