"""Reference digit sequences for verification."""

import logging
from functools import lru_cache
from pathlib import Path

from ..errors import ConfigurationError, ReferenceTooShortError

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_LENGTH = 10000
# Extra digits carried through the series to absorb truncation error
_GUARD_DIGITS = 10


def _arctan_inverse(x: int, unity: int) -> int:
    """arctan(1/x) scaled by ``unity``, summed until the terms vanish."""
    term = unity // x
    total = term
    x_squared = x * x
    n = 3
    sign = -1
    while term:
        term //= x_squared
        total += sign * (term // n)
        sign = -sign
        n += 2
    return total


@lru_cache(maxsize=8)
def pi_digits(count: int) -> str:
    """First ``count`` decimal digits of pi, starting with the leading 3.

    Uses Machin's formula, pi = 16 arctan(1/5) - 4 arctan(1/239), in
    fixed-point integer arithmetic.
    """
    if count <= 0:
        return ""
    unity = 10 ** (count + _GUARD_DIGITS)
    pi = 4 * (4 * _arctan_inverse(5, unity) - _arctan_inverse(239, unity))
    return str(pi // 10 ** _GUARD_DIGITS)[:count]


class ReferenceDigits:
    """A fixed digit sequence that candidate transcripts are scored against."""

    def __init__(self, digits: str, name: str = "custom"):
        if not all(ch in "0123456789" for ch in digits):
            raise ConfigurationError(f"Reference '{name}' contains non-digit characters")
        self.digits = digits
        self.name = name

    @classmethod
    def pi(cls, length: int = DEFAULT_REFERENCE_LENGTH) -> "ReferenceDigits":
        """Digits of pi, computed once per length."""
        logger.debug(f"Computing {length} digits of pi")
        return cls(pi_digits(length), name="pi")

    @classmethod
    def from_file(cls, path: str) -> "ReferenceDigits":
        """Read a reference from a text file, ignoring everything but 0-9.

        Raises:
            ConfigurationError: if the file cannot be read
        """
        try:
            text = Path(path).read_text(encoding='utf-8')
        except OSError as e:
            raise ConfigurationError(f"Cannot read reference file {path}: {e}") from e
        digits = "".join(ch for ch in text if ch in "0123456789")
        logger.info(f"Loaded {len(digits)} reference digits from {path}")
        return cls(digits, name=Path(path).stem)

    @classmethod
    def from_config(cls, config) -> "ReferenceDigits":
        """Build the reference named by the ``verification`` config section."""
        reference_file = config.get('verification.reference_file')
        if reference_file:
            return cls.from_file(reference_file)
        return cls.pi(int(config.get('verification.reference_length', DEFAULT_REFERENCE_LENGTH)))

    def prefix(self, count: int) -> str:
        """The first ``count`` reference digits.

        Raises:
            ReferenceTooShortError: if fewer than ``count`` digits are available
        """
        if count > len(self.digits):
            raise ReferenceTooShortError(count, len(self.digits))
        return self.digits[:count]

    def __len__(self) -> int:
        return len(self.digits)
