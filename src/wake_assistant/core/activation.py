"""Activation state machine: wake phrase, utterance capture and silence endpointing."""

from __future__ import annotations

import logging
from typing import Sequence

from ..audio.input.types import TranscriptSegment
from .events import SessionEvent
from .session import Session
from .wake_word import contains_wake_word

logger = logging.getLogger(__name__)


class ActivationStateMachine:
    """
    Drives a Session between DORMANT and ARMED, one polling cycle at a time.

    - DORMANT: segments are only scanned for the wake phrase. The matching
      segment is discarded; segments after it in the same cycle are captured.
    - ARMED: every segment is appended in order. The wake phrase is ordinary
      text here and never re-activates.
    - Silence is the only way out of ARMED: once the utterance is non-empty and
      more than `silence_threshold_ms` has passed since the last speech
      verdict, a FINALIZE event carries the text and the session resets.

    There is no upper bound on utterance length; a speaker who never pauses is
    never finalized.
    """

    def __init__(self, wake_phrase: str, silence_threshold_ms: int = 1000):
        self._wake_phrase = wake_phrase
        self._silence_threshold_ms = silence_threshold_ms

    @property
    def wake_phrase(self) -> str:
        return self._wake_phrase

    @property
    def silence_threshold_ms(self) -> int:
        return self._silence_threshold_ms

    def step(
        self,
        session: Session,
        speech_detected: bool,
        segments: Sequence[TranscriptSegment],
        now: float,
    ) -> list[SessionEvent]:
        """Advance the session by one cycle and return the events it produced."""
        if speech_detected:
            return self._on_speech(session, segments, now)
        return self._on_silence(session, now)

    def _on_speech(
        self,
        session: Session,
        segments: Sequence[TranscriptSegment],
        now: float,
    ) -> list[SessionEvent]:
        events: list[SessionEvent] = []

        for segment in segments:
            if not session.is_armed:
                if contains_wake_word(segment.text, self._wake_phrase):
                    session.arm()
                    logger.info("Wake phrase %r detected", self._wake_phrase)
                    events.append(SessionEvent.activated(now))
                continue

            session.utterance.append(segment.text, now)
            events.append(SessionEvent.partial_text(segment.text, now))

        if session.is_armed:
            # a speech verdict keeps the utterance open even with no new text
            session.utterance.mark_speech(now)

        return events

    def _on_silence(self, session: Session, now: float) -> list[SessionEvent]:
        if not session.is_armed or session.utterance.is_empty():
            return []

        elapsed_ms = session.utterance.elapsed_since_last_speech(now) * 1000.0
        if elapsed_ms <= self._silence_threshold_ms:
            return []

        text = session.utterance.text
        logger.info("Silence for %.0f ms, finalizing utterance (%d chars)", elapsed_ms, len(text))
        session.reset()
        return [SessionEvent.finalize(text, now)]
