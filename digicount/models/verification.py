"""Verification result model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class VerificationResult:
    """Position-by-position classification of a candidate transcript."""
    total_expected: int
    correct: int = 0
    wrong: int = 0
    missing: int = 0
    pause_markers: int = 0

    @property
    def accuracy(self) -> float:
        """Fraction of expected positions recited correctly."""
        if self.total_expected <= 0:
            return 0.0
        return self.correct / self.total_expected
