"""Unit tests for verification scoring and reference digits."""

from unittest.mock import Mock

import pytest

from digicount.errors import ConfigurationError, InvalidExpectedCountError, ReferenceTooShortError
from digicount.models.verification import VerificationResult
from digicount.services.reference_digits import ReferenceDigits, pi_digits
from digicount.services.verification import (
    VerificationScorer,
    filter_candidate,
    parse_expected_count,
    score,
)

PI_50 = "31415926535897932384626433832795028841971693993751"


@pytest.mark.unit
class TestScore:
    """Test cases for the position-by-position scorer."""

    def test_exact_match(self):
        """Test a fully correct recitation."""
        result = score(5, "31415", "31415926")

        assert result == VerificationResult(total_expected=5, correct=5)

    def test_pause_and_missing(self):
        """Test a pause marker and a short candidate."""
        result = score(5, "3-41", "31415")

        assert (result.correct, result.wrong, result.missing, result.pause_markers) == (3, 0, 1, 1)

    def test_pause_shifts_following_digits(self):
        """Test pause shifts following digits."""
        result = score(5, "3-11", "31415")

        assert (result.correct, result.wrong, result.missing, result.pause_markers) == (2, 1, 1, 1)

    def test_en_dash_is_a_pause_marker(self):
        """Test en dash is a pause marker."""
        result = score(3, "3 – 1", "314")

        # Filtered to "3–1": correct, pause, wrong
        assert (result.correct, result.wrong, result.missing, result.pause_markers) == (1, 1, 0, 1)

    def test_non_digit_characters_are_dropped(self):
        """Test non digit characters are dropped."""
        result = score(4, "3.14, 1!", "3141")

        assert result.correct == 4

    def test_empty_candidate_is_all_missing(self):
        """Test empty candidate is all missing."""
        result = score(3, "", "314")

        assert result.missing == 3
        assert result.accuracy == 0.0

    def test_candidate_longer_than_expected(self):
        """Test candidate longer than expected."""
        result = score(2, "314159", "31415926")

        assert result == VerificationResult(total_expected=2, correct=2)

    def test_classes_sum_to_expected(self):
        """Test classes sum to expected."""
        result = score(10, "3-4x15 92", PI_50)

        assert result.correct + result.wrong + result.missing + result.pause_markers == 10

    @pytest.mark.parametrize("expected", [0, -3])
    def test_non_positive_count_rejected(self, expected):
        """Test non positive count rejected."""
        with pytest.raises(InvalidExpectedCountError):
            score(expected, "314", "314")

    def test_accuracy(self):
        """Test accuracy is correct over expected."""
        assert score(4, "3140", "3141").accuracy == 0.75

    def test_filter_candidate(self):
        """Test filtering keeps digits and hyphens only."""
        assert filter_candidate("3 – 14-1 five") == "3–14-1"


@pytest.mark.unit
class TestParseExpectedCount:
    """Test cases for parsing the expected count."""

    @pytest.mark.parametrize("raw,expected", [("5", 5), (" 42 ", 42), ("10000", 10000)])
    def test_valid(self, raw, expected):
        """Test parsing a valid expected count."""
        assert parse_expected_count(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "0", "-1", "3.5"])
    def test_invalid(self, raw):
        """Test rejecting an invalid expected count."""
        assert parse_expected_count(raw) is None


@pytest.mark.unit
class TestReferenceDigits:
    """Test cases for reference digit sequences."""

    def test_pi_digits(self):
        """Test the first 50 digits of pi."""
        assert pi_digits(50) == PI_50

    def test_pi_digits_prefix_is_stable(self):
        """Test pi digits prefix is stable."""
        assert pi_digits(1000)[:50] == PI_50
        assert len(pi_digits(1000)) == 1000

    def test_pi_digits_zero(self):
        """Test zero digits of pi is empty."""
        assert pi_digits(0) == ""

    def test_pi_reference(self):
        """Test the pi reference sequence."""
        reference = ReferenceDigits.pi(100)

        assert len(reference) == 100
        assert reference.prefix(5) == "31415"
        assert reference.name == "pi"

    def test_prefix_too_long(self):
        """Test asking for more digits than the reference holds."""
        with pytest.raises(ReferenceTooShortError):
            ReferenceDigits("314").prefix(4)

    def test_rejects_non_digits(self):
        """Test a reference with non-digit characters is rejected."""
        with pytest.raises(ConfigurationError):
            ReferenceDigits("31a4")

    def test_from_file_keeps_only_digits(self, tmp_path):
        """Test from file keeps only digits."""
        path = tmp_path / "e.txt"
        path.write_text("2.71828\n18284", encoding="utf-8")

        reference = ReferenceDigits.from_file(str(path))

        assert reference.digits == "27182818284"
        assert reference.name == "e"

    def test_from_missing_file(self, tmp_path):
        """Test an unreadable reference file is a configuration error."""
        with pytest.raises(ConfigurationError):
            ReferenceDigits.from_file(str(tmp_path / "missing.txt"))

    def test_from_config_defaults_to_pi(self):
        """Test from config defaults to pi."""
        config = Mock()
        config.get.side_effect = lambda key, default=None: {"verification.reference_length": 20}.get(key, default)

        reference = ReferenceDigits.from_config(config)

        assert reference.digits == PI_50[:20]


@pytest.mark.unit
class TestVerificationScorer:
    """Test cases for VerificationScorer."""

    def test_verify(self):
        """Test verifying a recitation against pi."""
        scorer = VerificationScorer(ReferenceDigits.pi(50))

        result = scorer.verify("5", "3-41")

        assert result == VerificationResult(total_expected=5, correct=3, wrong=0, missing=1, pause_markers=1)

    def test_invalid_expected_returns_none(self):
        """Test invalid expected returns none."""
        scorer = VerificationScorer(ReferenceDigits.pi(50))

        assert scorer.verify("zero", "31415") is None
        assert scorer.verify("0", "31415") is None

    def test_reference_too_short(self):
        """Test reference too short."""
        scorer = VerificationScorer(ReferenceDigits("31415"))

        with pytest.raises(ReferenceTooShortError):
            scorer.verify("6", "314159")
