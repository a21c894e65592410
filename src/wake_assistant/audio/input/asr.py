"""Speech-to-text for captured windows using faster-whisper."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Optional

from faster_whisper import WhisperModel

from .types import AudioWindow, TranscriptSegment

logger = logging.getLogger("ASR")

# Common Whisper hallucination phrases; a segment made of nothing else is dropped (case-insensitive)
_HALLUCINATION_PHRASES = (
    "thank you",
    "thanks for watching",
    "thanks for listening",
    "[blank_audio]",
    "(silence)",
)
_HALLUCINATION_PATTERNS = tuple(
    re.compile(r"^[\s.,!?]*" + re.escape(p) + r"[\s.,!?]*$", re.IGNORECASE)
    for p in _HALLUCINATION_PHRASES
)
# Reduce noise from faster-whisper
logging.getLogger("faster_whisper").setLevel(logging.WARNING)


def _is_hallucination(text: str) -> bool:
    return any(pattern.match(text) for pattern in _HALLUCINATION_PATTERNS)


@dataclass(frozen=True)
class TranscriberConfig:
    """faster-whisper model and decoding settings."""
    model: str = "base.en"
    language: str = "en"        # "auto" lets the model detect
    n_threads: int = 4
    max_tokens: int = 32        # 0 means no limit
    translate: bool = False
    device: str = "cpu"
    compute_type: str = "default"


class Transcriber:
    """
    Transcribes one AudioWindow into ordered segments.

    Failures inside the model are logged and reported as zero segments; the
    polling loop never sees them as exceptions.
    """

    def __init__(self, cfg: TranscriberConfig = TranscriberConfig()):
        self._cfg = cfg
        logger.info("Loading ASR model: %s (device=%s, threads=%d)", cfg.model, cfg.device, cfg.n_threads)
        self._model = WhisperModel(
            cfg.model,
            device=cfg.device,
            compute_type=cfg.compute_type,
            cpu_threads=cfg.n_threads,
        )

    @property
    def config(self) -> TranscriberConfig:
        return self._cfg

    def _language(self) -> Optional[str]:
        if not self._cfg.language or self._cfg.language == "auto":
            return None
        return self._cfg.language

    def transcribe(self, window: AudioWindow) -> list[TranscriptSegment]:
        """Return segments in transcription order. Empty pcm returns []."""
        if window.pcm.size == 0:
            return []

        started_at = time.time()
        logger.debug("ASR started at %.3f", started_at)

        try:
            segments, _info = self._model.transcribe(
                window.pcm,
                language=self._language(),
                task="translate" if self._cfg.translate else "transcribe",
                beam_size=1,
                condition_on_previous_text=False,
                without_timestamps=True,
                vad_filter=False,
                max_new_tokens=self._cfg.max_tokens or None,
            )
            # segments is a lazy generator; decoding happens while iterating
            result = [
                TranscriptSegment(text=s.text, start_s=s.start, end_s=s.end)
                for s in segments
                if not _is_hallucination(s.text)
            ]
        except Exception as e:
            logger.error(f"Failed to process audio: {e}", exc_info=True)
            return []

        ended_at = time.time()
        logger.debug("ASR ended at %.3f, duration_s=%.3f, segments=%d", ended_at, ended_at - started_at, len(result))
        return result
