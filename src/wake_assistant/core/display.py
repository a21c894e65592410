"""Console output for the conversation."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from .events import EventType, SessionEvent


class ConsoleDisplay:
    """Prints conversation progress to stdout; diagnostics go to logging instead."""

    def __init__(self, wake_phrase: str, out: Optional[TextIO] = None):
        self._wake_phrase = wake_phrase
        self._out = out

    def _print(self, *args, **kwargs) -> None:
        print(*args, file=self._out or sys.stdout, flush=True, **kwargs)

    def started(self) -> None:
        self._print(f"[System started - waiting for wake word '{self._wake_phrase}']")

    def show_event(self, event: SessionEvent) -> None:
        if event.type is EventType.ACTIVATED:
            self._print("\n[Assistant activated]")
        elif event.type is EventType.PARTIAL_TEXT:
            self._print(event.text, end="")
        elif event.type is EventType.FINALIZE:
            self._print(f"\n[Processing: {event.text}]")

    def show_reply(self, reply: str) -> None:
        self._print(f"\n[Assistant]: {reply}\n")
        self._print(f"[Waiting for wake word '{self._wake_phrase}']")

    def stopped(self) -> None:
        self._print("\nGoodbye!")
