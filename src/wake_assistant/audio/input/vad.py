"""Energy-based voice activity detection and the gate the loop queries."""

from __future__ import annotations

import logging
import math
from typing import Optional, Protocol

import numpy as np
from scipy.signal import lfilter

from .types import AudioWindow, VADConfig

logger = logging.getLogger(__name__)


class SpeechDetector(Protocol):
    """Anything that can classify a window given the gate thresholds."""

    def detect(
        self,
        pcm: np.ndarray,
        sample_rate: int,
        silence_window_ms: int,
        vad_thold: float,
        freq_thold: float,
    ) -> bool:
        ...


def high_pass_filter(pcm: np.ndarray, cutoff_hz: float, sample_rate: int) -> np.ndarray:
    """First-order high-pass filter. Returns a new array; the input is untouched."""
    out = np.array(pcm, dtype=np.float32, copy=True)
    if len(out) < 2:
        return out

    rc = 1.0 / (2.0 * math.pi * cutoff_hz)
    dt = 1.0 / sample_rate
    alpha = dt / (rc + dt)

    # y[i] = alpha * (y[i-1] + x[i] - x[i-1]), seeded with y[0] = x[0]
    out[1:] = lfilter([alpha, -alpha], [1.0, -alpha], out[1:].astype(np.float64))
    return out


class EnergyVAD:
    """
    Compares the mean energy of the trailing silence window with the whole window.

    A window counts as speech when a voiced burst has occurred and the trailing
    `silence_window_ms` has since dropped below `vad_thold` times the overall
    energy, i.e. the speaker has just paused.
    """

    def detect(
        self,
        pcm: np.ndarray,
        sample_rate: int,
        silence_window_ms: int,
        vad_thold: float,
        freq_thold: float,
    ) -> bool:
        n_samples = len(pcm)
        n_samples_last = int(sample_rate * silence_window_ms / 1000)

        if n_samples_last >= n_samples:
            # not enough audio yet
            return False

        if freq_thold > 0.0:
            pcm = high_pass_filter(pcm, freq_thold, sample_rate)

        magnitude = np.abs(np.asarray(pcm, dtype=np.float64))
        energy_all = float(magnitude.mean())
        energy_last = float(magnitude[n_samples - n_samples_last:].mean()) if n_samples_last > 0 else 0.0

        if energy_all <= 0.0:
            return False

        logger.debug("VAD energy_all=%.6f energy_last=%.6f thold=%.2f", energy_all, energy_last, vad_thold)
        return energy_last <= vad_thold * energy_all


class VoiceActivityGate:
    """Binds a detector to the configured thresholds for the polling loop."""

    def __init__(self, cfg: VADConfig = VADConfig(), detector: Optional[SpeechDetector] = None):
        self._cfg = cfg
        self._detector = detector or EnergyVAD()

    @property
    def config(self) -> VADConfig:
        return self._cfg

    def is_speech(self, window: AudioWindow) -> bool:
        return self._detector.detect(
            window.pcm,
            window.sample_rate,
            self._cfg.silence_window_ms,
            self._cfg.vad_thold,
            self._cfg.freq_thold,
        )
