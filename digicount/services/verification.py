"""Scores a pasted digit transcript against a reference sequence."""

import logging
from typing import Optional, Sequence

from ..errors import InvalidExpectedCountError
from ..models.verification import VerificationResult
from .reference_digits import ReferenceDigits

logger = logging.getLogger(__name__)

DIGITS = frozenset("0123456789")
# ASCII hyphen and en dash; the transcript builder writes the en dash
PAUSE_CHARACTERS = frozenset("-–")


def filter_candidate(candidate_raw: str) -> str:
    """Keep only digits and pause characters, in order."""
    return "".join(ch for ch in candidate_raw if ch in DIGITS or ch in PAUSE_CHARACTERS)


def parse_expected_count(raw: str) -> Optional[int]:
    """Parse the expected digit count typed by the user.

    Returns:
        A positive integer, or None when the input is not one
    """
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    if value <= 0:
        return None
    return value


def score(expected_length: int, candidate_raw: str, reference: Sequence[str]) -> VerificationResult:
    """Classify each of the first ``expected_length`` positions.

    A position is missing when the filtered candidate is too short, a pause
    marker when it holds a hyphen, and otherwise correct or wrong by
    comparison with the reference digit.

    Raises:
        InvalidExpectedCountError: if ``expected_length`` is not positive
    """
    if expected_length <= 0:
        raise InvalidExpectedCountError(f"Expected digit count must be positive, got {expected_length}")

    candidate = filter_candidate(candidate_raw)
    correct = wrong = missing = pause_markers = 0

    for i in range(expected_length):
        if i >= len(candidate):
            missing += 1
        elif candidate[i] in PAUSE_CHARACTERS:
            pause_markers += 1
        elif candidate[i] == reference[i]:
            correct += 1
        else:
            wrong += 1

    return VerificationResult(
        total_expected=expected_length,
        correct=correct,
        wrong=wrong,
        missing=missing,
        pause_markers=pause_markers,
    )


class VerificationScorer:
    """Runs verification requests against a fixed reference."""

    def __init__(self, reference: ReferenceDigits):
        self.reference = reference

    def verify(self, raw_expected: str, candidate_raw: str) -> Optional[VerificationResult]:
        """Validate the expected count and score the candidate.

        Returns:
            The result, or None when ``raw_expected`` is not a positive
            integer and the caller should ask again

        Raises:
            ReferenceTooShortError: if the reference cannot cover the count
        """
        expected = parse_expected_count(raw_expected)
        if expected is None:
            logger.info(f"Rejected expected digit count: {raw_expected!r}")
            return None

        result = score(expected, candidate_raw, self.reference.prefix(expected))
        logger.info(
            f"Verified {expected} digits against {self.reference.name}: "
            f"{result.correct} correct, {result.wrong} wrong, "
            f"{result.missing} missing, {result.pause_markers} pauses"
        )
        return result
