"""Tests for the activation state machine."""

import pytest

from wake_assistant.audio.input.types import TranscriptSegment
from wake_assistant.core.activation import ActivationStateMachine
from wake_assistant.core.events import EventType
from wake_assistant.core.session import ConversationState, Session

WAKE = "hey assistant"
THRESHOLD_MS = 1000


def segments(*texts):
    return [TranscriptSegment(text=t) for t in texts]


@pytest.fixture
def machine():
    return ActivationStateMachine(WAKE, silence_threshold_ms=THRESHOLD_MS)


@pytest.fixture
def session():
    return Session()


def armed_with(machine, session, text, at):
    """Arm the session and give it some text, with the last speech at `at`."""
    machine.step(session, True, segments(WAKE), at)
    machine.step(session, True, segments(text), at)
    return session


class TestDormant:
    def test_wake_phrase_activates(self, machine, session):
        events = machine.step(session, True, segments("", "hey assistant can you help"), 100.0)

        assert [e.type for e in events] == [EventType.ACTIVATED]
        assert session.state is ConversationState.ARMED
        assert session.utterance.text == ""

    def test_speech_without_wake_phrase_is_ignored(self, machine, session):
        events = machine.step(session, True, segments("what time is it"), 100.0)

        assert events == []
        assert session.state is ConversationState.DORMANT
        assert session.utterance.is_empty()
        assert session.utterance.last_speech_at is None

    def test_silence_is_ignored(self, machine, session):
        assert machine.step(session, False, [], 100.0) == []
        assert session.state is ConversationState.DORMANT

    def test_wake_phrase_match_is_case_sensitive(self, machine, session):
        machine.step(session, True, segments("Hey Assistant"), 100.0)
        assert session.state is ConversationState.DORMANT

    def test_segments_before_match_are_not_captured(self, machine, session):
        machine.step(session, True, segments("ignored", WAKE), 100.0)
        assert session.is_armed
        assert session.utterance.text == ""

    def test_segments_after_match_in_same_cycle_are_captured(self, machine, session):
        events = machine.step(session, True, segments(WAKE, " set a timer"), 100.0)

        assert [e.type for e in events] == [EventType.ACTIVATED, EventType.PARTIAL_TEXT]
        assert events[1].text == " set a timer"
        assert session.utterance.text == " set a timer"

    def test_speech_verdict_with_failed_transcription_keeps_dormant(self, machine, session):
        assert machine.step(session, True, [], 100.0) == []
        assert session.state is ConversationState.DORMANT

    def test_activation_cycle_counts_as_speech(self, machine, session):
        machine.step(session, True, segments(WAKE), 100.0)
        assert session.utterance.last_speech_at == 100.0


class TestArmed:
    def test_segments_appended_in_order_with_partial_events(self, machine, session):
        machine.step(session, True, segments(WAKE), 100.0)
        events = machine.step(session, True, segments(" set", " a", " timer"), 101.0)

        assert [e.type for e in events] == [EventType.PARTIAL_TEXT] * 3
        assert [e.text for e in events] == [" set", " a", " timer"]
        assert session.utterance.text == " set a timer"

    def test_order_preserved_across_cycles(self, machine, session):
        machine.step(session, True, segments(WAKE), 100.0)
        machine.step(session, True, segments(" one", " two"), 101.0)
        machine.step(session, False, [], 101.5)
        machine.step(session, True, segments(" three"), 102.0)
        assert session.utterance.text == " one two three"

    def test_wake_phrase_while_armed_is_ordinary_text(self, machine, session):
        machine.step(session, True, segments(WAKE), 100.0)
        events = machine.step(session, True, segments(" hey assistant again"), 101.0)

        assert [e.type for e in events] == [EventType.PARTIAL_TEXT]
        assert session.utterance.text == " hey assistant again"
        assert session.is_armed

    def test_speech_without_segments_refreshes_last_speech(self, machine, session):
        armed_with(machine, session, " hello", 100.0)
        machine.step(session, True, [], 105.0)
        assert session.utterance.last_speech_at == 105.0
        assert session.utterance.text == " hello"

    def test_failed_transcription_does_not_change_state(self, machine, session):
        armed_with(machine, session, " hello", 100.0)
        assert machine.step(session, True, [], 100.5) == []
        assert session.is_armed


class TestSilenceFinalize:
    def test_finalizes_just_after_threshold(self, machine, session):
        armed_with(machine, session, "set a timer", 100.0)

        events = machine.step(session, False, [], 100.0 + (THRESHOLD_MS + 1) / 1000.0)

        assert [e.type for e in events] == [EventType.FINALIZE]
        assert events[0].text == "set a timer"
        assert session.state is ConversationState.DORMANT
        assert session.utterance.is_empty()
        assert session.utterance.last_speech_at is None

    def test_does_not_finalize_just_before_threshold(self, machine, session):
        armed_with(machine, session, "set a timer", 100.0)

        events = machine.step(session, False, [], 100.0 + (THRESHOLD_MS - 1) / 1000.0)

        assert events == []
        assert session.is_armed
        assert session.utterance.text == "set a timer"

    def test_does_not_finalize_exactly_at_threshold(self, machine, session):
        armed_with(machine, session, "set a timer", 100.0)
        assert machine.step(session, False, [], 100.0 + THRESHOLD_MS / 1000.0) == []

    def test_empty_utterance_never_finalizes(self, machine, session):
        machine.step(session, True, segments(WAKE), 100.0)
        for elapsed_s in (1.0, 5.0, 60.0, 3600.0):
            assert machine.step(session, False, [], 100.0 + elapsed_s) == []
        assert session.is_armed

    def test_whitespace_utterance_never_finalizes(self, machine, session):
        armed_with(machine, session, "  ", 100.0)
        assert machine.step(session, False, [], 200.0) == []
        assert session.is_armed

    def test_silence_after_finalize_is_noop(self, machine, session):
        armed_with(machine, session, "set a timer", 100.0)
        machine.step(session, False, [], 102.0)

        assert machine.step(session, False, [], 110.0) == []
        assert session.state is ConversationState.DORMANT
        assert session.utterance.is_empty()

    def test_speech_restarts_silence_timer(self, machine, session):
        armed_with(machine, session, "set", 100.0)
        machine.step(session, True, segments(" a timer"), 100.9)

        assert machine.step(session, False, [], 101.5) == []
        events = machine.step(session, False, [], 102.0)
        assert [e.text for e in events] == ["set a timer"]

    def test_no_length_cutoff_while_speaking(self, machine, session):
        machine.step(session, True, segments(WAKE), 100.0)
        for i in range(100):
            assert all(
                e.type is EventType.PARTIAL_TEXT
                for e in machine.step(session, True, segments(" word"), 100.5 + i * 0.5)
            )
        assert session.is_armed

    def test_rearm_after_finalize_requires_wake_phrase(self, machine, session):
        armed_with(machine, session, "first", 100.0)
        machine.step(session, False, [], 102.0)

        machine.step(session, True, segments("second"), 103.0)
        assert session.state is ConversationState.DORMANT

        events = machine.step(session, True, segments(WAKE, " second"), 104.0)
        assert [e.type for e in events] == [EventType.ACTIVATED, EventType.PARTIAL_TEXT]
        assert session.utterance.text == " second"


def test_full_scenario(machine, session):
    events = machine.step(session, True, segments("", "hey assistant can you help"), 100.0)
    assert [e.type for e in events] == [EventType.ACTIVATED]
    assert session.utterance.text == ""

    events = machine.step(session, True, segments("set a timer"), 101.0)
    assert session.utterance.text == "set a timer"

    finalized = []
    now = 101.0
    for _ in range(5):
        now += 0.5
        finalized += [e for e in machine.step(session, False, [], now) if e.type is EventType.FINALIZE]

    assert [e.text for e in finalized] == ["set a timer"]
    assert session.state is ConversationState.DORMANT
    assert session.utterance.is_empty()
