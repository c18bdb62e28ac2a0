"""Sentiment lexicons: numeric (AFINN style) or categorical (Lexicoder style)."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, NamedTuple

import yaml

from newstone.normalize import (
    NEGATION_CUES,
    expand_contractions,
    normalize_dictionary_punctuation,
    punctuation_to_space,
)

logger = logging.getLogger(__name__)


class LexiconLoadError(RuntimeError):
    """Raised when a lexicon cannot be loaded; scoring cannot proceed."""


class Polarity(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEG_POSITIVE = "neg_positive"
    NEG_NEGATIVE = "neg_negative"

    def negated(self) -> Polarity:
        return _NEGATED[self]


_NEGATED: dict[Polarity, Polarity] = {
    Polarity.POSITIVE: Polarity.NEG_POSITIVE,
    Polarity.NEGATIVE: Polarity.NEG_NEGATIVE,
    Polarity.NEG_POSITIVE: Polarity.POSITIVE,
    Polarity.NEG_NEGATIVE: Polarity.NEGATIVE,
}


class LexiconEntry(NamedTuple):
    polarity: Polarity
    weight: float  # 1.0 for categorical entries, |score| for numeric ones


def key_words(key: str) -> tuple[str, ...]:
    """Split a lexicon key into the words normalised text would contain."""
    text = normalize_dictionary_punctuation(key)
    text = expand_contractions(text)
    return tuple(punctuation_to_space(text).lower().split())


class Lexicon:
    """Immutable word/phrase → polarity table.

    Keys ending in ``*`` match any token starting with the rest of the key
    (longest prefix wins). Multi-word keys are exposed through ``phrases`` so
    the normaliser can join them into single tokens. Entries whose key starts
    with a negation cue ("not very good") are kept apart: they only match
    tokens the normaliser tagged as negated, and their words go into
    ``negated_phrases``, which are joined only after a negation cue.
    """

    def __init__(
        self,
        entries: Iterable[tuple[str, LexiconEntry]],
        kind: str = "categorical",
        name: str = "",
    ) -> None:
        exact: dict[str, LexiconEntry] = {}
        negated: dict[str, LexiconEntry] = {}
        prefixes: dict[str, LexiconEntry] = {}
        phrases: set[tuple[str, ...]] = set()
        negated_phrases: set[tuple[str, ...]] = set()

        for key, entry in entries:
            wildcard = key.strip().endswith("*")
            words = key_words(key.strip().rstrip("*"))
            if not words:
                continue
            table = exact
            if len(words) > 1 and words[0] in NEGATION_CUES:
                # "not good" is stored under "good" and only matches "neg_good"
                words = words[1:]
                table = negated
            if len(words) > 1:
                (negated_phrases if table is negated else phrases).add(words)
                if wildcard:
                    logger.debug("Wildcard ignored on multi-word key %r", key)
                table["_".join(words)] = entry
            elif wildcard and table is exact:
                prefixes[words[0]] = entry
            else:
                table[words[0]] = entry

        if not (exact or negated or prefixes):
            raise LexiconLoadError(f"Lexicon {name or '<unnamed>'} has no entries.")

        self.kind = kind
        self.name = name
        self._exact: Mapping[str, LexiconEntry] = MappingProxyType(exact)
        self._negated: Mapping[str, LexiconEntry] = MappingProxyType(negated)
        self._prefixes: tuple[tuple[str, LexiconEntry], ...] = tuple(
            sorted(prefixes.items(), key=lambda kv: len(kv[0]), reverse=True)
        )
        self.phrases: frozenset[tuple[str, ...]] = frozenset(phrases)
        self.negated_phrases: frozenset[tuple[str, ...]] = frozenset(negated_phrases)

    # ── construction ────────────────────────────────────────────────────

    @classmethod
    def from_scores(cls, scores: Mapping[str, float], name: str = "") -> Lexicon:
        """Build a numeric lexicon from ``{word: score}``; zero scores are dropped."""
        entries: list[tuple[str, LexiconEntry]] = []
        for word, value in scores.items():
            value = float(value)
            if value == 0:
                continue
            polarity = Polarity.POSITIVE if value > 0 else Polarity.NEGATIVE
            entries.append((str(word), LexiconEntry(polarity, abs(value))))
        return cls(entries, kind="numeric", name=name)

    @classmethod
    def from_categories(
        cls, categories: Mapping[str, Iterable[str]], name: str = ""
    ) -> Lexicon:
        """Build a categorical lexicon from ``{polarity: [words…]}``."""
        entries: list[tuple[str, LexiconEntry]] = []
        for category, words in categories.items():
            try:
                polarity = Polarity(category)
            except ValueError as exc:
                raise LexiconLoadError(f"Unknown polarity category: {category!r}") from exc
            entries.extend((str(w), LexiconEntry(polarity, 1.0)) for w in words or [])
        return cls(entries, kind="categorical", name=name)

    # ── lookup ──────────────────────────────────────────────────────────

    def lookup(self, word: str) -> LexiconEntry | None:
        """Return the entry for a plain (non-negated) token, if any."""
        word = word.lower()
        entry = self._exact.get(word)
        if entry is not None:
            return entry
        for prefix, prefixed in self._prefixes:
            if word.startswith(prefix):
                return prefixed
        return None

    def lookup_negated(self, word: str) -> LexiconEntry | None:
        """Return the polarity of *word* when it follows a negation cue.

        Explicit negated entries win; otherwise the plain entry is flipped
        into its negated bucket.
        """
        word = word.lower()
        entry = self._negated.get(word)
        if entry is not None:
            return entry
        plain = self.lookup(word)
        if plain is None:
            return None
        return LexiconEntry(plain.polarity.negated(), plain.weight)

    def __len__(self) -> int:
        return len(self._exact) + len(self._negated) + len(self._prefixes)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.lookup(word) is not None

    def __repr__(self) -> str:
        return f"Lexicon(name={self.name!r}, kind={self.kind!r}, entries={len(self)})"


# ── Loading ────────────────────────────────────────────────────────────────


def load_lexicon(path: str | Path) -> Lexicon:
    """Load a lexicon file.

    Supported formats:

    - ``.yml`` / ``.yaml`` with ``kind: numeric`` and an ``entries`` mapping,
      or ``kind: categorical`` and one list per polarity bucket;
    - ``.txt`` / ``.tsv`` with ``word<TAB>score`` lines (the AFINN layout).
    """
    p = Path(path)
    if not p.is_file():
        raise LexiconLoadError(f"Lexicon file not found: {p}")

    if p.suffix.lower() in {".txt", ".tsv"}:
        lexicon = Lexicon.from_scores(_read_tsv_scores(p), name=p.stem)
    elif p.suffix.lower() in {".yml", ".yaml"}:
        lexicon = _from_yaml(p)
    else:
        raise LexiconLoadError(f"Unsupported lexicon format: {p.suffix or p.name}")

    logger.info("Loaded %s lexicon '%s' with %d entries", lexicon.kind, lexicon.name, len(lexicon))
    return lexicon


def _from_yaml(p: Path) -> Lexicon:
    try:
        with open(p, encoding="utf-8") as fh:
            cfg: Any = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise LexiconLoadError(f"Could not read lexicon {p}: {exc}") from exc

    if not isinstance(cfg, dict):
        raise LexiconLoadError(f"Lexicon {p} must be a YAML mapping.")

    name = str(cfg.get("name") or p.stem)
    kind = cfg.get("kind", "categorical")
    if kind == "numeric":
        entries = cfg.get("entries") or {}
        if not isinstance(entries, dict):
            raise LexiconLoadError(f"Lexicon {p}: 'entries' must be a mapping.")
        try:
            return Lexicon.from_scores(entries, name=name)
        except (TypeError, ValueError) as exc:
            raise LexiconLoadError(f"Lexicon {p}: non-numeric score ({exc})") from exc
    if kind == "categorical":
        categories = {pol.value: cfg[pol.value] for pol in Polarity if cfg.get(pol.value)}
        return Lexicon.from_categories(categories, name=name)
    raise LexiconLoadError(f"Lexicon {p}: unknown kind {kind!r}")


def _read_tsv_scores(p: Path) -> dict[str, float]:
    scores: dict[str, float] = {}
    with open(p, encoding="utf-8", newline="") as fh:
        for lineno, row in enumerate(csv.reader(fh, delimiter="\t"), start=1):
            if not row or not row[0].strip() or row[0].startswith("#"):
                continue
            if len(row) < 2:
                raise LexiconLoadError(f"{p}:{lineno}: expected 'word<TAB>score'")
            try:
                scores[row[0].strip()] = float(row[1])
            except ValueError as exc:
                raise LexiconLoadError(f"{p}:{lineno}: non-numeric score {row[1]!r}") from exc
    return scores


def load_stopwords(path: str | Path) -> frozenset[str]:
    """Read one stop word per line; blank lines and ``#`` comments are ignored."""
    p = Path(path)
    if not p.exists():
        logger.warning("Stop-word file not found, skipping: %s", p)
        return frozenset()
    words: set[str] = set()
    for raw in p.read_text(encoding="utf-8").splitlines():
        stripped = raw.strip().lower()
        if stripped and not stripped.startswith("#"):
            words.add(stripped)
    logger.info("Loaded %d stop words from %s", len(words), p)
    return frozenset(words)
