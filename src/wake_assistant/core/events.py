from dataclasses import dataclass
from enum import Enum, auto


class EventType(Enum):
    """What the activation state machine decided during one cycle."""
    ACTIVATED = auto()     # Wake phrase heard, now capturing the utterance
    PARTIAL_TEXT = auto()  # One transcript segment appended to the utterance
    FINALIZE = auto()      # Silence long enough, utterance ready for dispatch


@dataclass(frozen=True)
class SessionEvent:
    type: EventType
    timestamp: float
    text: str = ""

    @classmethod
    def activated(cls, now: float) -> "SessionEvent":
        return cls(type=EventType.ACTIVATED, timestamp=now)

    @classmethod
    def partial_text(cls, text: str, now: float) -> "SessionEvent":
        return cls(type=EventType.PARTIAL_TEXT, timestamp=now, text=text)

    @classmethod
    def finalize(cls, text: str, now: float) -> "SessionEvent":
        return cls(type=EventType.FINALIZE, timestamp=now, text=text)
