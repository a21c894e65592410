"""Audio input subsystem - capture, voice activity gate and transcription.

`mic`, `asr` and `vad_silero` pull in native audio/model libraries and are
imported directly by the modules that need them.
"""

from __future__ import annotations

from .types import AudioFormat, AudioWindow, CaptureConfig, TranscriptSegment, VADConfig
from .vad import EnergyVAD, SpeechDetector, VoiceActivityGate, high_pass_filter

__all__ = [
    "AudioFormat",
    "AudioWindow",
    "CaptureConfig",
    "TranscriptSegment",
    "VADConfig",
    "EnergyVAD",
    "SpeechDetector",
    "VoiceActivityGate",
    "high_pass_filter",
]
