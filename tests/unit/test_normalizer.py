"""Unit tests for spoken-token normalization."""

import pytest

from digicount.models.transcription import DigitMappingPolicy
from digicount.transcription.normalizer import (
    AGGRESSIVE_WORDS,
    STRICT_WORDS,
    count_digits,
    digits_from,
    tokenize,
    word_table,
)

STRICT = DigitMappingPolicy.STRICT
AGGRESSIVE = DigitMappingPolicy.AGGRESSIVE


@pytest.mark.unit
class TestDigitsFrom:
    """Test cases for digits_from."""

    def test_literal_numerals(self):
        """Test literal numerals become digits."""
        assert digits_from("3141", STRICT) == ["3", "1", "4", "1"]

    def test_number_words(self):
        """Test number words become digits."""
        assert digits_from("three one four", STRICT) == ["3", "1", "4"]

    def test_numerals_come_before_words(self):
        """Test numerals come before words."""
        # Concatenated, not interleaved in text order
        assert digits_from("one 2 three", STRICT) == ["2", "1", "3"]

    def test_punctuation_splits_tokens(self):
        """Test punctuation splits tokens."""
        assert digits_from("five,six.seven-eight", STRICT) == ["5", "6", "7", "8"]

    def test_tokens_are_lower_cased(self):
        """Test tokens are lower cased."""
        assert digits_from("Nine ZERO", STRICT) == ["9", "0"]

    def test_numerals_inside_words(self):
        """Test numerals inside words."""
        assert digits_from("route66", AGGRESSIVE) == ["6", "6"]

    def test_unmapped_words_contribute_nothing(self):
        """Test unmapped words contribute nothing."""
        assert digits_from("hello there friend", AGGRESSIVE) == []

    def test_empty_text(self):
        """Test empty text yields no digits."""
        assert digits_from("", AGGRESSIVE) == []

    def test_other_script_decimals_fold_to_ascii(self):
        """Test other script decimals fold to ascii."""
        assert digits_from("٣", STRICT) == ["3"]

    def test_strict_ignores_homophones(self):
        """Test strict ignores homophones."""
        assert digits_from("oh won too tree for ate", STRICT) == []

    def test_aggressive_maps_homophones(self):
        """Test aggressive maps homophones."""
        assert digits_from("oh won too tree fore ate", AGGRESSIVE) == ["0", "1", "2", "3", "4", "8"]

    @pytest.mark.parametrize("word,digit", [("o", "0"), ("to", "2"), ("for", "4")])
    def test_aggressive_short_homophones(self, word, digit):
        """Test aggressive short homophones."""
        assert digits_from(word, AGGRESSIVE) == [digit]

    def test_count_digits(self):
        """Test counting digits in a fragment."""
        assert count_digits("3 point one four", AGGRESSIVE) == 3


@pytest.mark.unit
class TestWordTables:
    """Test cases for the policy tables."""

    def test_strict_table_is_zero_to_nine(self):
        """Test strict table is zero to nine."""
        assert word_table(STRICT) == STRICT_WORDS
        assert sorted(STRICT_WORDS.values()) == [str(d) for d in range(10)]

    def test_aggressive_is_superset_of_strict(self):
        """Test aggressive is superset of strict."""
        for word, digit in STRICT_WORDS.items():
            assert AGGRESSIVE_WORDS[word] == digit
            assert digits_from(word, AGGRESSIVE) == digits_from(word, STRICT)

    def test_every_table_value_is_single_digit(self):
        """Test every table value is single digit."""
        for digit in word_table(AGGRESSIVE).values():
            assert len(digit) == 1 and digit.isdigit()

    def test_tokenize_drops_underscores_and_symbols(self):
        """Test tokenize drops underscores and symbols."""
        assert tokenize("One_two! THREE") == ["one", "two", "three"]
