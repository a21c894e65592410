import logging
import signal
import threading
from typing import Protocol

logger = logging.getLogger(__name__)


class StopSignal(Protocol):
    """Protocol for the shutdown signal polled once per loop cycle."""

    def is_set(self) -> bool: ...


class GracefulShutdown:
    def __init__(self):
        self.stop_event = threading.Event()

    def stop(self):
        self.stop_event.set()

    def is_set(self) -> bool:
        return self.stop_event.is_set()

    def install_signal_handlers(self):
        """Turn SIGINT/SIGTERM into a stop request instead of an exception."""
        def _handler(signum, frame):
            logger.info("Received signal %d, shutting down", signum)
            self.stop()

        signal.signal(signal.SIGINT, _handler)
        signal.signal(signal.SIGTERM, _handler)
