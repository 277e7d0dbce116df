"""Spoken-token to digit normalization.

A fragment of recognized text contributes digits two ways: numerals that
appear literally ("3", "14") and number words ("three", "one four"). The
numerals are emitted first, in text order, followed by the digits of the
mapped words, also in text order.
"""

import re
import logging
import unicodedata
from typing import Dict, List

from ..models.transcription import DigitMappingPolicy

logger = logging.getLogger(__name__)

# Runs of letters or digits; underscore counts as a boundary.
_TOKEN_PATTERN = re.compile(r"[^\W_]+")

STRICT_WORDS: Dict[str, str] = {
    "zero": "0",
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
}

HOMOPHONE_WORDS: Dict[str, str] = {
    "oh": "0",
    "o": "0",
    "won": "1",
    "too": "2",
    "to": "2",
    "tree": "3",
    "for": "4",
    "fore": "4",
    "ate": "8",
}

AGGRESSIVE_WORDS: Dict[str, str] = {**STRICT_WORDS, **HOMOPHONE_WORDS}


def word_table(policy: DigitMappingPolicy) -> Dict[str, str]:
    """Return the word→digit table for a mapping policy."""
    if policy is DigitMappingPolicy.AGGRESSIVE:
        return AGGRESSIVE_WORDS
    return STRICT_WORDS


def tokenize(text: str) -> List[str]:
    """Split text on every non-alphanumeric boundary, lower-casing each token."""
    return [token.lower() for token in _TOKEN_PATTERN.findall(text)]


def _numerals(text: str) -> List[str]:
    # unicodedata.decimal folds other scripts' decimal digits onto 0-9
    return [str(unicodedata.decimal(ch)) for ch in text if ch.isdecimal()]


def digits_from(text: str, policy: DigitMappingPolicy) -> List[str]:
    """Extract single-character digit strings from a text fragment.

    Args:
        text: Recognized text fragment
        policy: Word mapping policy to apply

    Returns:
        Numerals found in the text, followed by the digits of mapped words
    """
    table = word_table(policy)
    out = _numerals(text)
    out.extend(table[token] for token in tokenize(text) if token in table)
    return out


def count_digits(text: str, policy: DigitMappingPolicy) -> int:
    """Number of digits ``digits_from`` would extract from ``text``."""
    return len(digits_from(text, policy))
