"""Silero VAD-based speech detector."""

from __future__ import annotations

import logging

import numpy as np
import torch
from silero_vad import load_silero_vad

logger = logging.getLogger(__name__)


class SileroVAD:
    """
    Answers the same question as EnergyVAD using the Silero model (ONNX).

    A window counts as speech when some chunk before the trailing silence
    window is voiced and no chunk inside it is. Energy and high-pass
    thresholds are ignored; `speech_threshold` applies to model probabilities.
    """

    def __init__(self, speech_threshold: float = 0.5):
        self._speech_threshold = speech_threshold
        # Model initialization - load immediately, fail fast if not available
        self._model = load_silero_vad(onnx=True, opset_version=16)

    @staticmethod
    def chunk_size(sample_rate: int) -> int:
        # silero-vad requires 512 samples at 16 kHz and 256 at 8 kHz
        return 512 if sample_rate == 16000 else 256

    def _probabilities(self, pcm: np.ndarray, sample_rate: int) -> list[float]:
        size = self.chunk_size(sample_rate)
        self._model.reset_states()
        probs = []
        for start in range(0, len(pcm) - size + 1, size):
            chunk = np.ascontiguousarray(pcm[start:start + size], dtype=np.float32)
            probs.append(float(self._model(torch.from_numpy(chunk), sample_rate).item()))
        return probs

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
            return False

        size = self.chunk_size(sample_rate)
        boundary = n_samples - n_samples_last
        probs = self._probabilities(pcm, sample_rate)

        voiced_before = False
        voiced_tail = False
        for i, prob in enumerate(probs):
            if prob < self._speech_threshold:
                continue
            if (i + 1) * size > boundary:
                voiced_tail = True
            else:
                voiced_before = True

        logger.debug("Silero VAD voiced_before=%s voiced_tail=%s chunks=%d", voiced_before, voiced_tail, len(probs))
        return voiced_before and not voiced_tail
