"""Audio input subsystem data types and configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np


@dataclass(frozen=True)
class AudioFormat:
    """Audio format specification."""
    sample_rate: int = 16000
    channels: int = 1
    dtype: str = "float32"  # sounddevice dtype name


@dataclass(frozen=True)
class CaptureConfig:
    """Microphone ring buffer and polling configuration."""
    length_ms: int = 10000   # ring buffer capacity
    window_ms: int = 2000    # audio pulled per cycle
    step_ms: int = 500       # fresh audio awaited per cycle
    timeout_s: float = 2.0   # max wait for fresh audio


@dataclass(frozen=True)
class VADConfig:
    """Voice activity gate thresholds."""
    silence_window_ms: int = 1000
    vad_thold: float = 0.6
    freq_thold: float = 100.0


@dataclass(frozen=True)
class AudioWindow:
    """Most recent audio pulled from the microphone for one cycle."""
    pcm: np.ndarray          # shape: (n_samples,) float32
    sample_rate: int
    captured_at_s: float
    end_sample: int = 0      # samples captured since init() up to the window's end

    @property
    def duration_ms(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return len(self.pcm) * 1000.0 / self.sample_rate


@dataclass(frozen=True)
class TranscriptSegment:
    """One piece of text produced by the transcriber, in transcription order."""
    text: str
    start_s: float = 0.0
    end_s: float = 0.0


class AudioSource(Protocol):
    """What the polling loop needs from a microphone."""

    def get(self, ms: int, timeout_s: Optional[float] = None) -> AudioWindow: ...

    def consume(self, window: AudioWindow) -> None: ...

    def clear(self) -> None: ...
