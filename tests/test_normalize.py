"""Unit tests for the text normalisation steps."""

import pytest

from newstone.normalize import (
    PROPER_NOUN_PLACEHOLDER,
    TextNormalizer,
    consolidate_phrases,
    expand_contractions,
    mark_negations,
    mask_proper_nouns,
    normalize,
    normalize_dictionary_punctuation,
    punctuation_to_space,
    strip_acronym_periods,
)


class TestContractions:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("They don't stay", "They do not stay"),
            ("We can't help", "We can not help"),
            ("Won't happen", "Will not happen"),
            ("They're here", "They are here"),
            ("We've seen", "We have seen"),
            ("It's hard", "It is hard"),
            ("The country's border", "The country border"),
            ("They don’t stay", "They do not stay"),
        ],
    )
    def test_expansion(self, text: str, expected: str) -> None:
        assert expand_contractions(text) == expected


class TestPunctuation:
    def test_typographic_variants(self) -> None:
        text = "“Safe” — they said…"
        assert normalize_dictionary_punctuation(text) == '"Safe"  -  they said...'

    def test_acronyms_lose_periods(self) -> None:
        assert strip_acronym_periods("The U.S. and the U.N. agreed") == "The US and the UN agreed"

    def test_abbreviations_lose_periods(self) -> None:
        assert strip_acronym_periods("Mr. Smith met Dr. Jones") == "Mr Smith met Dr Jones"

    def test_punctuation_to_space(self) -> None:
        assert punctuation_to_space('"Help," she said - now!') == "Help she said now"

    def test_underscore_and_tags_survive(self) -> None:
        assert punctuation_to_space("not neg_good, well_off.") == "not neg_good well_off"


class TestNegation:
    def test_next_token_is_tagged(self) -> None:
        assert mark_negations("refugees are not welcome here") == "refugees are not neg_welcome here"

    def test_wider_window(self) -> None:
        assert mark_negations("never very welcome here", window=2) == "never neg_very neg_welcome here"

    def test_cue_at_end(self) -> None:
        assert mark_negations("certainly not") == "certainly not"

    def test_tagged_tokens_are_not_retagged(self) -> None:
        once = mark_negations("not not good")
        assert once == "not neg_not neg_good"
        assert mark_negations(once) == once

    def test_zero_window_disables(self) -> None:
        assert mark_negations("not good", window=0) == "not good"


class TestPhrases:
    def test_joins_phrase(self) -> None:
        assert consolidate_phrases("they were well off", [("well", "off")]) == "they were well_off"

    def test_negation_tag_carries_over(self) -> None:
        text = consolidate_phrases("not neg_well off", [("well", "off")])
        assert text == "not neg_well_off"

    def test_longest_phrase_wins(self) -> None:
        phrases = [("a", "lot"), ("a", "lot", "of")]
        assert consolidate_phrases("a lot of help", phrases) == "a_lot_of help"

    def test_tags_inside_phrase_are_ignored(self) -> None:
        phrases = [("can", "not", "stand")]
        assert consolidate_phrases("they can not neg_stand it", phrases) == "they can_not_stand it"

    def test_negated_phrase_needs_tagged_head(self) -> None:
        negated = [("very", "good")]
        assert consolidate_phrases("very good care", negated_phrases=negated) == "very good care"
        text = consolidate_phrases("not neg_very good care", negated_phrases=negated)
        assert text == "not neg_very_good care"


class TestProperNouns:
    def test_masks_capitalised_words_after_first(self) -> None:
        text = mask_proper_nouns("Refugees met Hope in Berlin")
        assert text == f"refugees met {PROPER_NOUN_PLACEHOLDER} in {PROPER_NOUN_PLACEHOLDER}"

    def test_keeps_acronyms_and_cues(self) -> None:
        assert mask_proper_nouns("The UN said Never again") == "the un said never again"


class TestNormalize:
    def test_full_pipeline(self) -> None:
        assert normalize("Refugees aren't welcome in the U.S., Mr. Smith said.") == (
            "refugees are not neg_welcome in the us propernoun propernoun said"
        )

    def test_phrases_via_normalizer(self) -> None:
        normalizer = TextNormalizer(phrases=[("Well", "Off")])
        assert normalizer("Migrants weren't well off.") == "migrants were not neg_well_off"

    @pytest.mark.parametrize(
        "text",
        [
            "Refugees are not not welcome!",
            "Migrants can't stand the U.S. policy, said Mr. Brown.",
            "No refugee was “safe” — nobody helped.",
            "They were not well off at all.",
        ],
    )
    def test_idempotent(self, text: str) -> None:
        normalizer = TextNormalizer(phrases=[("well", "off"), ("can", "not", "stand")])
        once = normalizer(text)
        assert normalizer(once) == once
