"""Audio subsystem - microphone input, speech gating and recognition."""

from .input import (
    AudioFormat,
    AudioWindow,
    CaptureConfig,
    TranscriptSegment,
    VADConfig,
    VoiceActivityGate,
)

__all__ = [
    "AudioFormat",
    "AudioWindow",
    "CaptureConfig",
    "TranscriptSegment",
    "VADConfig",
    "VoiceActivityGate",
]
