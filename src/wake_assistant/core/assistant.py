"""Main polling loop."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable, Optional

from ..audio.input.types import AudioSource, CaptureConfig, TranscriptSegment
from ..audio.input.vad import VoiceActivityGate
from .activation import ActivationStateMachine
from .display import ConsoleDisplay
from .events import EventType, SessionEvent
from .session import Session
from .shutdown import StopSignal

if TYPE_CHECKING:
    from ..audio.input.asr import Transcriber
    from ..llm.completion import Dispatcher

logger = logging.getLogger("Assistant")


class WakeWordAssistant:
    """
    Single-threaded orchestrator.

    One cycle pulls a window from the audio source, asks the voice activity
    gate for a verdict, transcribes speech windows, feeds the activation state
    machine and dispatches finalized utterances. The Session is owned here and
    only changes between cycles.
    """

    def __init__(
        self,
        source: AudioSource,
        gate: VoiceActivityGate,
        transcriber: "Transcriber",
        machine: ActivationStateMachine,
        dispatcher: "Dispatcher",
        display: ConsoleDisplay,
        shutdown_signal: StopSignal,
        capture_cfg: CaptureConfig = CaptureConfig(),
        clock: Callable[[], float] = time.time,
    ):
        self._source = source
        self._gate = gate
        self._transcriber = transcriber
        self._machine = machine
        self._dispatcher = dispatcher
        self._display = display
        self._shutdown_signal = shutdown_signal
        self._capture_cfg = capture_cfg
        self._clock = clock
        self.session = Session()
        self.last_reply: Optional[str] = None

    def run_cycle(self) -> list[SessionEvent]:
        window = self._source.get(self._capture_cfg.window_ms, self._capture_cfg.timeout_s)
        now = self._clock()

        speech = self._gate.is_speech(window)
        segments: list[TranscriptSegment] = []
        if speech:
            segments = self._transcriber.transcribe(window)
            # drop only what was transcribed; audio captured meanwhile stays buffered
            self._source.consume(window)
            logger.debug("Speech window (%.0f ms) -> %d segments", window.duration_ms, len(segments))

        events = self._machine.step(self.session, speech, segments, now)
        for event in events:
            self._display.show_event(event)
            if event.type is EventType.FINALIZE:
                self._handle_finalize(event)
        return events

    def _handle_finalize(self, event: SessionEvent) -> None:
        reply = self._dispatcher.dispatch(event.text)
        self.last_reply = reply
        self._display.show_reply(reply)

    def run(self) -> None:
        """Loop until the shutdown signal is set; checked once per cycle."""
        self._display.started()
        logger.info("Listening for wake word %r", self._machine.wake_phrase)
        try:
            while not self._shutdown_signal.is_set():
                self.run_cycle()
        finally:
            self._display.stopped()
            logger.info("Assistant loop stopped")
