"""Text normalisation ahead of lexicon scoring.

Each step takes a string and returns a new string. They run in a fixed order
because each one expects the shape left by the previous one:

1. contraction expansion ("don't" → "do not")
2. dictionary punctuation (typographic quotes and dashes → ASCII)
3. acronym / abbreviation periods ("U.S." → "US", "Mr." → "Mr")
4. remaining punctuation → whitespace
5. negation marking ("not good" → "not neg_good")
6. multi-word lexicon phrases joined with "_" ("well off" → "well_off")
7. proper-noun masking, then lower-casing

Running the pipeline on its own output leaves it unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any

NEGATION_PREFIX = "neg_"
PROPER_NOUN_PLACEHOLDER = "propernoun"

NEGATION_CUES: frozenset[str] = frozenset({
    "not", "no", "never", "nor", "neither", "none", "nobody", "nothing",
    "nowhere", "without", "cannot",
})

# ── Contractions ───────────────────────────────────────────────────────────
_APOS = "['’ʼ]"

_IRREGULAR_CONTRACTIONS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(rf"\bwon{_APOS}t\b", re.IGNORECASE), "will not"),
    (re.compile(rf"\bcan{_APOS}t\b", re.IGNORECASE), "can not"),
    (re.compile(rf"\bshan{_APOS}t\b", re.IGNORECASE), "shall not"),
    (re.compile(rf"\bain{_APOS}t\b", re.IGNORECASE), "is not"),
]

_SUFFIX_CONTRACTIONS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(rf"(\w)n{_APOS}t\b", re.IGNORECASE), r"\1 not"),
    (re.compile(rf"(\w){_APOS}re\b", re.IGNORECASE), r"\1 are"),
    (re.compile(rf"(\w){_APOS}ve\b", re.IGNORECASE), r"\1 have"),
    (re.compile(rf"(\w){_APOS}ll\b", re.IGNORECASE), r"\1 will"),
    (re.compile(rf"(\w){_APOS}m\b", re.IGNORECASE), r"\1 am"),
    (re.compile(rf"(\w){_APOS}d\b", re.IGNORECASE), r"\1 would"),
]

_IS_CONTRACTION_RE = re.compile(
    rf"\b(it|that|there|here|he|she|what|who|where|how){_APOS}s\b", re.IGNORECASE
)
_POSSESSIVE_RE = re.compile(rf"(\w){_APOS}s\b")

# ── Punctuation variants ──────────────────────────────────────────────────
_PUNCT_VARIANTS: list[tuple[str, str]] = [
    ("‘", "'"), ("’", "'"), ("ʼ", "'"), ("‛", "'"),
    ("“", '"'), ("”", '"'), ("„", '"'), ("«", '"'), ("»", '"'),
    ("–", " - "), ("—", " - "), ("―", " - "),
    ("…", "..."),
]

# ── Acronyms and abbreviations ─────────────────────────────────────────────
_ACRONYM_RE = re.compile(r"\b(?:[A-Za-z]\.){2,}")

_ABBREVIATIONS: tuple[str, ...] = (
    "Mr", "Mrs", "Ms", "Dr", "Prof", "St", "Sr", "Jr", "Sen", "Rep", "Gov",
    "Gen", "Lt", "Col", "Sgt", "Capt", "Inc", "Ltd", "Corp", "Co", "vs", "etc",
    "Jan", "Feb", "Mar", "Apr", "Jun", "Jul", "Aug", "Sep", "Sept", "Oct",
    "Nov", "Dec",
)
_ABBREVIATION_RE = re.compile(
    r"\b(" + "|".join(_ABBREVIATIONS) + r")\.", re.IGNORECASE
)

_NON_WORD_RE = re.compile(r"[^\w\s]")


def expand_contractions(text: str) -> str:
    """Expand English contractions so negations appear as a literal "not"."""
    for pattern, repl in _IRREGULAR_CONTRACTIONS:
        text = pattern.sub(lambda m, r=repl: _match_case(m.group(0), r), text)
    for pattern, repl in _SUFFIX_CONTRACTIONS:
        text = pattern.sub(repl, text)
    text = _IS_CONTRACTION_RE.sub(r"\1 is", text)
    # Remaining "'s" is a possessive
    return _POSSESSIVE_RE.sub(r"\1", text)


def normalize_dictionary_punctuation(text: str) -> str:
    """Map typographic punctuation onto the ASCII forms the lexicon uses."""
    for variant, ascii_form in _PUNCT_VARIANTS:
        text = text.replace(variant, ascii_form)
    return text


def strip_acronym_periods(text: str) -> str:
    """Drop the periods inside acronyms and after known abbreviations."""
    text = _ACRONYM_RE.sub(lambda m: m.group(0).replace(".", ""), text)
    return _ABBREVIATION_RE.sub(r"\1", text)


def punctuation_to_space(text: str) -> str:
    """Turn every remaining punctuation mark into whitespace."""
    return " ".join(_NON_WORD_RE.sub(" ", text).split())


def is_negated(token: str) -> bool:
    return token.startswith(NEGATION_PREFIX)


def strip_negation(token: str) -> str:
    return token[len(NEGATION_PREFIX):] if is_negated(token) else token


def mark_negations(text: str, window: int = 1) -> str:
    """Prefix the *window* tokens after a negation cue with ``neg_``.

    Cues are recognised on untagged tokens only and tagged tokens are never
    tagged again, so a second pass is a no-op.
    """
    if window < 1:
        return text
    original = text.split()
    tokens = list(original)
    for i, token in enumerate(original):
        if is_negated(token) or token.lower() not in NEGATION_CUES:
            continue
        for j in range(i + 1, min(i + 1 + window, len(tokens))):
            if not is_negated(tokens[j]):
                tokens[j] = NEGATION_PREFIX + tokens[j]
    return " ".join(tokens)


def consolidate_phrases(
    text: str,
    phrases: Iterable[Sequence[str]] = (),
    negated_phrases: Iterable[Sequence[str]] = (),
) -> str:
    """Join multi-word lexicon phrases into single ``_``-separated tokens.

    Matching is case-insensitive and longest-first, and ignores negation tags
    inside the phrase ("can not neg_stand" still matches "can not stand").
    A tag on the first word carries over to the joined token.
    *negated_phrases* are joined only when their first word is tagged, so
    plain "very good" stays two tokens when the lexicon only lists
    "not very good".
    """
    by_head: dict[str, list[tuple[tuple[str, ...], bool]]] = {}
    for source, negated_only in ((phrases, False), (negated_phrases, True)):
        for phrase in source:
            words = tuple(w.lower() for w in phrase)
            if len(words) > 1:
                by_head.setdefault(words[0], []).append((words, negated_only))
    if not by_head:
        return text
    for candidates in by_head.values():
        candidates.sort(key=lambda c: len(c[0]), reverse=True)

    tokens = text.split()
    out: list[str] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        head = strip_negation(token).lower()
        matched: tuple[str, ...] | None = None
        for phrase, negated_only in by_head.get(head, ()):
            if negated_only and not is_negated(token):
                continue
            tail = tokens[i + 1 : i + len(phrase)]
            if len(tail) == len(phrase) - 1 and all(
                strip_negation(t).lower() == w for t, w in zip(tail, phrase[1:])
            ):
                matched = phrase
                break
        if matched is None:
            out.append(token)
            i += 1
            continue
        prefix = NEGATION_PREFIX if is_negated(token) else ""
        out.append(prefix + "_".join(matched))
        i += len(matched)
    return " ".join(out)


def mask_proper_nouns(text: str) -> str:
    """Replace capitalised words that do not open the sentence, then lower-case.

    Only Titlecase words are masked (all-caps acronyms are kept), and
    negation cues are left alone.
    """
    tokens = text.split()
    for i, token in enumerate(tokens):
        if i == 0 or is_negated(token) or token.lower() in NEGATION_CUES:
            continue
        if len(token) > 1 and token[0].isupper() and token[1:].islower():
            tokens[i] = PROPER_NOUN_PLACEHOLDER
    return " ".join(tokens).lower()


def normalize(
    text: str,
    phrases: Iterable[Sequence[str]] = (),
    negation_window: int = 1,
    negated_phrases: Iterable[Sequence[str]] = (),
) -> str:
    """Run every normalisation step over *text*, in order."""
    text = expand_contractions(text)
    text = normalize_dictionary_punctuation(text)
    text = strip_acronym_periods(text)
    text = punctuation_to_space(text)
    text = mark_negations(text, window=negation_window)
    text = consolidate_phrases(text, phrases, negated_phrases)
    return mask_proper_nouns(text)


class TextNormalizer:
    """``normalize`` with the lexicon phrases and negation window bound once."""

    def __init__(
        self,
        phrases: Iterable[Sequence[str]] = (),
        negation_window: int = 1,
        negated_phrases: Iterable[Sequence[str]] = (),
    ) -> None:
        self.phrases: tuple[tuple[str, ...], ...] = tuple(
            tuple(w.lower() for w in p) for p in phrases
        )
        self.negated_phrases: tuple[tuple[str, ...], ...] = tuple(
            tuple(w.lower() for w in p) for p in negated_phrases
        )
        self.negation_window = negation_window

    @classmethod
    def for_lexicon(cls, lexicon: Any, negation_window: int = 1) -> TextNormalizer:
        """Bind both phrase sets of a :class:`~newstone.lexicon.Lexicon`."""
        return cls(
            lexicon.phrases,
            negation_window=negation_window,
            negated_phrases=lexicon.negated_phrases,
        )

    def __call__(self, text: str) -> str:
        return normalize(text, self.phrases, self.negation_window, self.negated_phrases)


def _match_case(original: str, replacement: str) -> str:
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement
