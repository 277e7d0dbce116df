"""Transcript-to-digit engine for DigiCount."""

from .base import AbstractRecognitionBackend, RecognitionTask
from .normalizer import digits_from, count_digits, word_table
from .reconciler import SegmentReconciler
from .transcript_builder import PauseAwareTranscriptBuilder, PAUSE_MARKER

__all__ = [
    "AbstractRecognitionBackend",
    "RecognitionTask",
    "digits_from",
    "count_digits",
    "word_table",
    "SegmentReconciler",
    "PauseAwareTranscriptBuilder",
    "PAUSE_MARKER",
]
