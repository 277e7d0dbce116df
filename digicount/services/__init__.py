"""Services layer for DigiCount application logic."""

from .counter_state import CounterState
from .reference_digits import ReferenceDigits, pi_digits
from .session_log_store import SessionLogStore
from .session_timer import SessionTimer, format_elapsed
from .verification import VerificationScorer, score, parse_expected_count

__all__ = [
    "CounterState",
    "ReferenceDigits",
    "pi_digits",
    "SessionLogStore",
    "SessionTimer",
    "format_elapsed",
    "VerificationScorer",
    "score",
    "parse_expected_count",
]
