import os
from pathlib import Path
from typing import Any, Optional
from pydantic import BaseModel, Field
from dotenv import load_dotenv
import logging

logger = logging.getLogger(__name__)

class AssistantConfig(BaseModel):
    wake_word: str = Field(default="test", description="Phrase that arms the assistant")
    silence_threshold_ms: int = Field(default=1000, description="Silence after speech that finalizes an utterance")
    whisper_model: str = Field(default="base.en", description="faster-whisper model size or path to a converted model")
    language: str = Field(default="en", description="Spoken language (auto to detect)")
    n_threads: int = Field(default=min(4, os.cpu_count() or 1), description="Number of threads used by the transcriber")
    max_tokens: int = Field(default=32, description="Maximum number of tokens per audio window (0 - no limit)")
    translate: bool = Field(default=False, description="Translate speech to English instead of transcribing")
    step_ms: int = Field(default=500, description="Fresh audio awaited before each cycle")
    length_ms: int = Field(default=10000, description="Microphone ring buffer length")
    window_ms: int = Field(default=2000, description="Audio window analyzed per cycle")
    capture_id: int = Field(default=-1, description="Capture device ID (-1 - default device)")
    sample_rate: int = Field(default=16000, description="Capture sample rate")
    vad_thold: float = Field(default=0.6, description="Voice activity detection threshold")
    freq_thold: float = Field(default=100.0, description="High-pass frequency cutoff")
    vad_backend: str = Field(default="energy", description="Voice detector: energy or silero")
    ollama_url: str = Field(default="http://localhost:11434/api/generate", description="Completion endpoint URL")
    ollama_model: str = Field(default="qwen2.5", description="Model name sent to the completion endpoint")
    request_timeout_s: float = Field(default=120.0, description="Completion request timeout in seconds")
    log_level: str = Field(default="INFO", description="Logging level")

# environment variable -> config field
_ENV_FIELDS = {
    "WAKE_WORD": "wake_word",
    "SILENCE_THRESHOLD_MS": "silence_threshold_ms",
    "WHISPER_MODEL": "whisper_model",
    "LANGUAGE": "language",
    "N_THREADS": "n_threads",
    "MAX_TOKENS": "max_tokens",
    "TRANSLATE": "translate",
    "STEP_MS": "step_ms",
    "LENGTH_MS": "length_ms",
    "WINDOW_MS": "window_ms",
    "CAPTURE_ID": "capture_id",
    "SAMPLE_RATE": "sample_rate",
    "VAD_THOLD": "vad_thold",
    "FREQ_THOLD": "freq_thold",
    "VAD_BACKEND": "vad_backend",
    "OLLAMA_URL": "ollama_url",
    "OLLAMA_MODEL": "ollama_model",
    "REQUEST_TIMEOUT_S": "request_timeout_s",
    "LOG_LEVEL": "log_level",
}

def load_config(config_path: Optional[Path] = None, overrides: Optional[dict[str, Any]] = None) -> AssistantConfig:
    """
    Build the config from a .env file and the environment, then apply overrides.

    Overrides (usually parsed command-line options) win; None values are ignored.
    """
    if config_path is None:
        config_path = Path(".env")

    if config_path.exists():
        load_dotenv(config_path)
        logger.info(f"Loaded environment variables from {config_path}")
    else:
        logger.warning(f"Config file {config_path} not found, using environment variables only")

    values: dict[str, Any] = {}
    for env_name, field_name in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is not None and raw != "":
            values[field_name] = raw

    if "translate" in values:
        values["translate"] = values["translate"].lower() in ("true", "1", "yes")

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    try:
        return AssistantConfig(**values)
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise


def create_example_env_file(path: Path = Path(".env.example")):
    example_content = """# Phrase that arms the assistant (case-sensitive)
WAKE_WORD=test

# Silence after speech that finalizes an utterance (ms)
SILENCE_THRESHOLD_MS=1000

# faster-whisper model: tiny.en, base.en, small, medium, large-v3 or a local path
WHISPER_MODEL=base.en
LANGUAGE=en
N_THREADS=4
MAX_TOKENS=32
TRANSLATE=false

# Audio capture (ms)
STEP_MS=500
LENGTH_MS=10000
WINDOW_MS=2000
CAPTURE_ID=-1
SAMPLE_RATE=16000

# Voice activity detection: energy or silero
VAD_BACKEND=energy
VAD_THOLD=0.6
FREQ_THOLD=100.0

# Completion service
OLLAMA_URL=http://localhost:11434/api/generate
OLLAMA_MODEL=qwen2.5
REQUEST_TIMEOUT_S=120

# Logging level
LOG_LEVEL=INFO
"""

    with open(path, "w") as f:
        f.write(example_content)

    logger.info(f"Created example environment file at {path}")

def setup_logging(log_level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
