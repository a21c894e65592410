"""Conversation state owned by the polling loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional


class ConversationState(Enum):
    DORMANT = auto()   # Waiting for the wake phrase
    ARMED = auto()     # Capturing the user's utterance


class Utterance:
    """Text accumulated while armed, plus the time speech was last heard."""

    def __init__(self):
        self._parts: list[str] = []
        self._last_speech_at: Optional[float] = None

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def last_speech_at(self) -> Optional[float]:
        return self._last_speech_at

    def append(self, text: str, now: float) -> None:
        self._parts.append(text)
        self._last_speech_at = now

    def mark_speech(self, now: float) -> None:
        self._last_speech_at = now

    def clear(self) -> None:
        self._parts = []
        self._last_speech_at = None

    def is_empty(self) -> bool:
        # whitespace-only text is not worth dispatching
        return not self.text.strip()

    def elapsed_since_last_speech(self, now: float) -> float:
        """Seconds since the last speech verdict. Raises if none since activation."""
        if self._last_speech_at is None:
            raise RuntimeError("no speech recorded since activation")
        return now - self._last_speech_at


@dataclass
class Session:
    """ConversationState + Utterance pair, mutated only between cycles."""

    state: ConversationState = ConversationState.DORMANT
    utterance: Utterance = field(default_factory=Utterance)

    @property
    def is_armed(self) -> bool:
        return self.state is ConversationState.ARMED

    def arm(self) -> None:
        self.utterance.clear()
        self.state = ConversationState.ARMED

    def reset(self) -> None:
        self.utterance.clear()
        self.state = ConversationState.DORMANT
