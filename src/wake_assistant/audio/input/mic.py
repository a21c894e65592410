"""Microphone audio capture into a ring buffer."""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

import numpy as np
import sounddevice as sd

from .types import AudioFormat, AudioWindow, CaptureConfig

logger = logging.getLogger(__name__)


class Mic:
    """
    Continuously captures microphone audio into a fixed-size ring buffer.

    The sounddevice callback only copies samples in; the polling loop pulls the
    most recent window with `get()`, which blocks until enough fresh audio has
    arrived or the timeout elapses.
    """

    def __init__(
        self,
        audio_format: AudioFormat = AudioFormat(),
        capture_cfg: CaptureConfig = CaptureConfig(),
    ):
        self._audio_format = audio_format
        self._capture_cfg = capture_cfg
        self._sample_rate = audio_format.sample_rate

        self._stream: Optional[sd.InputStream] = None
        self._running = False

        self._cond = threading.Condition()
        self._buffer = np.zeros(0, dtype=np.float32)
        self._pos = 0
        self._len = 0
        self._fresh = 0
        self._written = 0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def init(self, device: Optional[int], sample_rate: int) -> bool:
        """Open the input stream. Returns False if the device cannot be opened."""
        self._sample_rate = sample_rate
        capacity = int(sample_rate * self._capture_cfg.length_ms / 1000)
        with self._cond:
            self._buffer = np.zeros(max(capacity, 1), dtype=np.float32)
            self._pos = 0
            self._len = 0
            self._fresh = 0
            self._written = 0

        # -1 mirrors "default device" on the command line
        if device is not None and device < 0:
            device = None

        dtype_map = {
            "float32": np.float32,
            "int16": np.int16,
            "int32": np.int32,
        }
        dtype = dtype_map.get(self._audio_format.dtype, np.float32)

        try:
            self._stream = sd.InputStream(
                callback=self._audio_callback,
                samplerate=sample_rate,
                channels=self._audio_format.channels,
                dtype=dtype,
                device=device,
            )
        except Exception as e:
            logger.error(f"Failed to open input device {device}: {e}", exc_info=True)
            self._stream = None
            return False

        logger.info("Microphone opened (device=%s, sample_rate=%d, buffer=%d ms)",
                    device, sample_rate, self._capture_cfg.length_ms)
        return True

    def resume(self) -> bool:
        if self._stream is None:
            logger.error("resume() called before init()")
            return False
        if self._running:
            return True
        self._stream.start()
        with self._cond:
            self._running = True
        return True

    def pause(self) -> bool:
        if self._stream is None or not self._running:
            return False
        self._stream.stop()
        with self._cond:
            self._running = False
            self._cond.notify_all()
        return True

    def clear(self) -> None:
        """Drop all buffered audio."""
        with self._cond:
            self._pos = 0
            self._len = 0
            self._fresh = 0

    def close(self) -> None:
        self.pause()
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        logger.info("Microphone capture stopped")

    def push(self, pcm: np.ndarray) -> None:
        """Append mono samples to the ring buffer and wake any waiting `get()`."""
        pcm = np.asarray(pcm, dtype=np.float32).reshape(-1)
        with self._cond:
            capacity = len(self._buffer)
            if capacity == 0 or len(pcm) == 0:
                return
            self._written += len(pcm)
            if len(pcm) > capacity:
                pcm = pcm[-capacity:]

            n = len(pcm)
            first = min(n, capacity - self._pos)
            self._buffer[self._pos:self._pos + first] = pcm[:first]
            if n > first:
                self._buffer[:n - first] = pcm[first:]

            self._pos = (self._pos + n) % capacity
            self._len = min(self._len + n, capacity)
            self._fresh += n
            self._cond.notify_all()

    def get(self, ms: int, timeout_s: Optional[float] = None) -> AudioWindow:
        """
        Return the most recent `ms` of audio.

        Waits until `step_ms` of new audio has been captured since the previous
        call, or until `timeout_s` passes. If less audio than requested is
        buffered, the returned window is shorter.
        """
        if timeout_s is None:
            timeout_s = self._capture_cfg.timeout_s
        step_samples = int(self._sample_rate * self._capture_cfg.step_ms / 1000)

        with self._cond:
            self._cond.wait_for(
                lambda: self._fresh >= step_samples or not self._running,
                timeout=timeout_s,
            )
            self._fresh = 0

            wanted = int(self._sample_rate * ms / 1000)
            n = min(wanted, self._len)
            pcm = self._read_last(n)
            end_sample = self._written

        return AudioWindow(
            pcm=pcm,
            sample_rate=self._sample_rate,
            captured_at_s=time.time(),
            end_sample=end_sample,
        )

    def consume(self, window: AudioWindow) -> None:
        """
        Drop buffered audio up to the end of `window`.

        Samples captured after the window was returned stay buffered and are
        included in the next `get()`.
        """
        with self._cond:
            newer = max(self._written - window.end_sample, 0)
            self._len = min(self._len, newer)

    def _read_last(self, n: int) -> np.ndarray:
        if n <= 0:
            return np.zeros(0, dtype=np.float32)
        capacity = len(self._buffer)
        start = (self._pos - n) % capacity
        if start + n <= capacity:
            return self._buffer[start:start + n].copy()
        return np.concatenate([self._buffer[start:], self._buffer[:start + n - capacity]])

    def _audio_callback(self, indata, frames, time_info, status) -> None:
        if status:
            logger.warning(f"Audio callback status: {status}")

        # indata shape is (frames, channels); keep the first channel
        if indata.ndim > 1 and indata.shape[1] > 0:
            pcm = indata[:, 0].astype(np.float32)
        else:
            pcm = indata.flatten().astype(np.float32)

        self.push(pcm)
