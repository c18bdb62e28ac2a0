"""Unit tests for lexicon construction, lookup and loading."""

from pathlib import Path

import pytest

from newstone import config
from newstone.lexicon import (
    Lexicon,
    LexiconLoadError,
    Polarity,
    load_lexicon,
    load_stopwords,
)


class TestLookup:
    def test_numeric_entries(self) -> None:
        lex = Lexicon.from_scores({"welcome": 2, "crisis": -3, "meh": 0})
        assert lex.kind == "numeric"
        assert lex.lookup("Welcome") == (Polarity.POSITIVE, 2.0)
        assert lex.lookup("crisis") == (Polarity.NEGATIVE, 3.0)
        assert lex.lookup("meh") is None
        assert lex.lookup("weather") is None

    def test_wildcard_longest_prefix_wins(self) -> None:
        lex = Lexicon.from_categories({"positive": ["hope*"], "negative": ["hopeless*"]})
        assert lex.lookup("hopeful").polarity is Polarity.POSITIVE
        assert lex.lookup("hopelessly").polarity is Polarity.NEGATIVE

    def test_exact_entry_beats_wildcard(self) -> None:
        lex = Lexicon.from_categories({"positive": ["care*"], "negative": ["careless"]})
        assert lex.lookup("careless").polarity is Polarity.NEGATIVE
        assert lex.lookup("caring") is None

    def test_phrases_are_exposed_and_joined(self) -> None:
        lex = Lexicon.from_categories({"positive": ["well off", "well-being"]})
        assert ("well", "off") in lex.phrases
        assert ("well", "being") in lex.phrases
        assert lex.lookup("well_off").polarity is Polarity.POSITIVE

    def test_contractions_in_keys_are_expanded(self) -> None:
        lex = Lexicon.from_categories({"negative": ["can't stand"]})
        assert ("can", "not", "stand") in lex.phrases
        assert lex.lookup("can_not_stand").polarity is Polarity.NEGATIVE


class TestNegatedLookup:
    def test_plain_entry_is_flipped(self) -> None:
        lex = Lexicon.from_scores({"welcome": 2, "bad": -3})
        assert lex.lookup_negated("welcome") == (Polarity.NEG_POSITIVE, 2.0)
        assert lex.lookup_negated("bad") == (Polarity.NEG_NEGATIVE, 3.0)

    def test_explicit_negated_entry_only_matches_negated_tokens(self) -> None:
        lex = Lexicon.from_categories({"neg_positive": ["not very good"], "positive": ["safe"]})
        assert lex.lookup("very_good") is None
        assert lex.lookup_negated("very_good").polarity is Polarity.NEG_POSITIVE
        assert ("very", "good") in lex.negated_phrases
        assert ("very", "good") not in lex.phrases

    def test_unknown_word(self) -> None:
        assert Lexicon.from_scores({"good": 3}).lookup_negated("weather") is None


class TestConstructionErrors:
    def test_empty_lexicon(self) -> None:
        with pytest.raises(LexiconLoadError):
            Lexicon.from_scores({"meh": 0})

    def test_unknown_category(self) -> None:
        with pytest.raises(LexiconLoadError):
            Lexicon.from_categories({"joyful": ["happy"]})


class TestLoadLexicon:
    def test_numeric_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "afinn.yml"
        path.write_text("kind: numeric\nentries:\n  welcome: 2\n  war: -2\n")
        lex = load_lexicon(path)
        assert lex.kind == "numeric"
        assert lex.name == "afinn"
        assert len(lex) == 2

    def test_categorical_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "lsd.yaml"
        path.write_text(
            "name: lsd\nkind: categorical\npositive: [good, help*]\nnegative: [crisis]\n"
        )
        lex = load_lexicon(path)
        assert lex.name == "lsd"
        assert lex.lookup("helping").polarity is Polarity.POSITIVE

    def test_tsv(self, tmp_path: Path) -> None:
        path = tmp_path / "AFINN-111.txt"
        path.write_text("# comment\nabandon\t-2\nwelcome\t2\n\n")
        lex = load_lexicon(path)
        assert lex.lookup("abandon") == (Polarity.NEGATIVE, 2.0)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(LexiconLoadError):
            load_lexicon(tmp_path / "nope.yml")

    def test_unknown_kind(self, tmp_path: Path) -> None:
        path = tmp_path / "x.yml"
        path.write_text("kind: fuzzy\nentries: {good: 1}\n")
        with pytest.raises(LexiconLoadError):
            load_lexicon(path)

    def test_non_numeric_score(self, tmp_path: Path) -> None:
        path = tmp_path / "x.yml"
        path.write_text("kind: numeric\nentries: {good: high}\n")
        with pytest.raises(LexiconLoadError):
            load_lexicon(path)

    def test_bad_tsv_row(self, tmp_path: Path) -> None:
        path = tmp_path / "x.tsv"
        path.write_text("good\tvery\n")
        with pytest.raises(LexiconLoadError):
            load_lexicon(path)

    def test_unsupported_format(self, tmp_path: Path) -> None:
        path = tmp_path / "x.json"
        path.write_text("{}")
        with pytest.raises(LexiconLoadError):
            load_lexicon(path)

    def test_shipped_lexicons_load(self) -> None:
        lexicons = config.PROJECT_ROOT / "config" / "lexicons"
        assert load_lexicon(lexicons / "afinn_sample.tsv").kind == "numeric"
        lsd = load_lexicon(lexicons / "lsd_sample.yml")
        assert lsd.kind == "categorical"
        assert lsd.lookup_negated("bad").polarity is Polarity.NEG_NEGATIVE


class TestLoadStopwords:
    def test_reads_words(self, tmp_path: Path) -> None:
        path = tmp_path / "stop.txt"
        path.write_text("# stop words\nThe\n\nand\n")
        assert load_stopwords(path) == frozenset({"the", "and"})

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_stopwords(tmp_path / "missing.txt") == frozenset()
