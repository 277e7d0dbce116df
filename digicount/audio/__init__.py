"""Audio capture for DigiCount.

``AudioCapture`` lives in ``digicount.audio.capture`` and is imported from
there so that the PyAudio dependency is only loaded where audio is captured.
"""

from .base import AbstractAudioSource, AudioTap

__all__ = [
    'AbstractAudioSource',
    'AudioTap',
]
