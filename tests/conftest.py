import os

import pytest


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance_ms(self, ms):
        self.now += ms / 1000.0


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def clean_env():
    """Remove config variables so tests see defaults; restore afterwards."""
    original_env = os.environ.copy()
    for name in list(os.environ):
        if name in (
            "WAKE_WORD", "SILENCE_THRESHOLD_MS", "WHISPER_MODEL", "LANGUAGE", "N_THREADS",
            "MAX_TOKENS", "TRANSLATE", "STEP_MS", "LENGTH_MS", "WINDOW_MS", "CAPTURE_ID",
            "SAMPLE_RATE", "VAD_THOLD", "FREQ_THOLD", "VAD_BACKEND", "OLLAMA_URL",
            "OLLAMA_MODEL", "REQUEST_TIMEOUT_S", "LOG_LEVEL",
        ):
            del os.environ[name]

    yield

    os.environ.clear()
    os.environ.update(original_env)
