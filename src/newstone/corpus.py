"""Read article records from JSON-lines or CSV files."""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from newstone.models import Document

logger = logging.getLogger(__name__)


class CorpusError(Exception):
    """Raised when a corpus file cannot be read."""


def load_records(path: str | Path) -> list[dict[str, Any]]:
    """Return every record of a ``.jsonl`` or ``.csv`` corpus file."""
    p = Path(path)
    if not p.is_file():
        raise CorpusError(f"Corpus file not found: {p}")

    suffix = p.suffix.lower()
    if suffix in {".jsonl", ".ndjson"}:
        records = list(_iter_jsonl(p))
    elif suffix == ".csv":
        with open(p, encoding="utf-8", newline="") as fh:
            records = [dict(row) for row in csv.DictReader(fh)]
    else:
        raise CorpusError(f"Unsupported corpus format: {suffix or p.name}")

    logger.info("Loaded %d records from %s", len(records), p)
    return records


def _iter_jsonl(p: Path) -> Iterator[dict[str, Any]]:
    with open(p, encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise CorpusError(f"{p}:{lineno}: invalid JSON ({exc.msg})") from exc
            if not isinstance(record, dict):
                raise CorpusError(f"{p}:{lineno}: expected a JSON object")
            yield record


def record_id(record: Mapping[str, Any], id_field: str = "doc_id") -> str:
    value = record.get(id_field)
    return "" if value is None else str(value)


def to_document(
    record: Mapping[str, Any],
    id_field: str = "doc_id",
    text_field: str = "text",
) -> Document:
    """Build a :class:`Document`; every other field becomes metadata.

    Raises pydantic's ``ValidationError`` for a missing or blank id.
    """
    metadata = {k: v for k, v in record.items() if k not in (id_field, text_field)}
    text = record.get(text_field)
    return Document(
        doc_id=record_id(record, id_field),
        text="" if text is None else str(text),
        metadata=metadata,
    )
