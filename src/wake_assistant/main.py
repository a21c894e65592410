"""wake-assistant - entry point for the voice loop."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from wake_assistant.audio.input.types import AudioFormat, CaptureConfig, VADConfig
from wake_assistant.audio.input.vad import EnergyVAD, VoiceActivityGate
from wake_assistant.config.settings import AssistantConfig, create_example_env_file, load_config, setup_logging
from wake_assistant.core.activation import ActivationStateMachine
from wake_assistant.core.assistant import WakeWordAssistant
from wake_assistant.core.display import ConsoleDisplay
from wake_assistant.core.shutdown import GracefulShutdown
from wake_assistant.llm.completion import CompletionClient, Dispatcher

logger = logging.getLogger(__name__)

# option dest -> (flags, type, help)
_OPTIONS = {
    "n_threads": (("-t", "--threads"), int, "number of threads to use during transcription"),
    "step_ms": (("--step",), int, "fresh audio awaited per cycle in milliseconds"),
    "length_ms": (("--length",), int, "microphone buffer length in milliseconds"),
    "window_ms": (("--window",), int, "audio analyzed per cycle in milliseconds"),
    "capture_id": (("-c", "--capture"), int, "capture device ID"),
    "max_tokens": (("-mt", "--max-tokens"), int, "maximum number of tokens per audio window"),
    "vad_thold": (("-vth", "--vad-thold"), float, "voice activity detection threshold"),
    "freq_thold": (("-fth", "--freq-thold"), float, "high-pass frequency cutoff"),
    "language": (("-l", "--language"), str, "spoken language"),
    "whisper_model": (("-m", "--model"), str, "model size or path"),
    "wake_word": (("-w", "--wake-word"), str, "wake phrase"),
    "silence_threshold_ms": (("-st", "--silence-ms"), int, "silence that ends an utterance in milliseconds"),
    "ollama_url": (("--ollama-url",), str, "completion endpoint URL"),
    "ollama_model": (("--ollama-model",), str, "completion model name"),
    "log_level": (("--log-level",), str, "logging level"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wake-word voice assistant for a local completion service")
    defaults = AssistantConfig.model_fields
    for dest, (flags, type_, help_text) in _OPTIONS.items():
        parser.add_argument(*flags, dest=dest, type=type_, default=None,
                            help=f"{help_text} [default: {defaults[dest].default}]")
    parser.add_argument("--vad", dest="vad_backend", choices=["energy", "silero"], default=None,
                        help="voice detector [default: energy]")
    parser.add_argument("-tr", "--translate", dest="translate", action="store_true", default=None,
                        help="translate speech to English")
    parser.add_argument("--config", type=str, default=".env", help="Path to config file")
    parser.add_argument("--create-config", action="store_true", help="Create example config file")
    return parser


def run_assistant(config: AssistantConfig) -> int:
    """Initialize the microphone and models, then run the loop. Returns the exit code."""
    from wake_assistant.audio.input.asr import Transcriber, TranscriberConfig
    from wake_assistant.audio.input.mic import Mic

    # Ctrl+C during model loading stops the loop instead of raising mid-startup
    shutdown_signal = GracefulShutdown()
    shutdown_signal.install_signal_handlers()

    capture_cfg = CaptureConfig(
        length_ms=config.length_ms,
        window_ms=config.window_ms,
        step_ms=config.step_ms,
    )
    mic = Mic(audio_format=AudioFormat(sample_rate=config.sample_rate), capture_cfg=capture_cfg)
    if not mic.init(config.capture_id, config.sample_rate):
        logger.error("audio init failed")
        return 1

    try:
        mic.resume()

        try:
            transcriber = Transcriber(TranscriberConfig(
                model=config.whisper_model,
                language=config.language,
                n_threads=config.n_threads,
                max_tokens=config.max_tokens,
                translate=config.translate,
            ))
            if config.vad_backend == "silero":
                from wake_assistant.audio.input.vad_silero import SileroVAD
                detector = SileroVAD()
            elif config.vad_backend == "energy":
                detector = EnergyVAD()
            else:
                raise ValueError(f"unknown VAD backend: {config.vad_backend}")
        except Exception as e:
            logger.error(f"Failed to initialize models: {e}", exc_info=True)
            return 1

        client = CompletionClient(
            url=config.ollama_url,
            model=config.ollama_model,
            timeout=config.request_timeout_s,
        )
        assistant = WakeWordAssistant(
            source=mic,
            gate=VoiceActivityGate(
                VADConfig(vad_thold=config.vad_thold, freq_thold=config.freq_thold),
                detector=detector,
            ),
            transcriber=transcriber,
            machine=ActivationStateMachine(config.wake_word, config.silence_threshold_ms),
            dispatcher=Dispatcher(client),
            display=ConsoleDisplay(config.wake_word),
            shutdown_signal=shutdown_signal,
            capture_cfg=capture_cfg,
        )

        try:
            assistant.run()
        finally:
            client.close()
    finally:
        mic.close()
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.create_config:
        create_example_env_file()
        print("Example configuration file created at .env.example")
        print("Copy it to .env and adjust as needed.")
        return 0

    overrides = {dest: getattr(args, dest) for dest in list(_OPTIONS) + ["vad_backend", "translate"]}
    try:
        config = load_config(Path(args.config), overrides)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 2

    setup_logging(config.log_level)
    return run_assistant(config)


if __name__ == "__main__":
    sys.exit(main())
