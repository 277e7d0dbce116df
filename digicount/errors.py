"""Exception types for DigiCount."""


class DigiCountError(Exception):
    """Base class for all DigiCount errors."""


class ConfigurationError(DigiCountError):
    """Raised when configuration is missing or unusable."""


class ReferenceTooShortError(ConfigurationError):
    """Raised when more reference digits are requested than are available."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Reference holds {available} digits, {requested} requested"
        )


class InvalidExpectedCountError(DigiCountError, ValueError):
    """Raised when the expected digit count is not a positive integer."""


class RecognizerUnavailableError(DigiCountError):
    """Raised when the speech recognizer cannot start a cycle."""
