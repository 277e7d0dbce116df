"""DigiCount: count spoken digits and verify recited digit transcripts."""

__version__ = "0.1.0"
