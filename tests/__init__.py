"""
Wake Assistant Tests
====================

Unit tests for the wake-word assistant components. Native collaborators
(sounddevice, faster-whisper, Silero, the completion endpoint) are mocked.

Test Structure:
- test_activation.py: Dormant/armed transitions and silence endpointing
- test_assistant.py: The polling loop with scripted collaborators
- test_completion.py: JSON-lines reply parsing and dispatch failures
- test_vad.py: Energy and Silero speech detectors
- conftest.py: PCM generators, fake clock and environment fixtures

To run tests:
    pytest tests/
"""
