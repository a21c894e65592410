"""Client for an Ollama-style streaming completion endpoint."""

from __future__ import annotations

import json
import logging
from typing import Iterable, Optional, Union

import requests

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:11434/api/generate"
DEFAULT_MODEL = "qwen2.5"


def parse_response_lines(lines: Iterable[Union[str, bytes]]) -> str:
    """
    Concatenate the "response" fragments of newline-delimited JSON objects.

    Blank, malformed and non-object lines are skipped, as are objects whose
    "response" is missing or not a string.
    """
    parts = []
    for raw in lines:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        line = raw.strip()
        if not line:
            continue
        try:
            chunk = json.loads(line)
        except ValueError:
            logger.debug("Skipping malformed response line: %r", line[:200])
            continue
        if not isinstance(chunk, dict):
            continue
        fragment = chunk.get("response")
        if isinstance(fragment, str):
            parts.append(fragment)
    return "".join(parts)


class CompletionClient:
    """Posts {"model", "prompt"} and reads back a JSON-lines stream."""

    def __init__(
        self,
        url: str = DEFAULT_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = 120.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def generate(self, prompt: str) -> str:
        """Return the full reply. Raises requests.RequestException on transport or HTTP errors."""
        payload = {"model": self.model, "prompt": prompt}
        with self.session.post(self.url, json=payload, stream=True, timeout=self.timeout) as response:
            response.raise_for_status()
            return parse_response_lines(response.iter_lines())

    def close(self) -> None:
        self.session.close()


class Dispatcher:
    """
    Sends one finalized utterance to the completion service.

    A failed call yields an empty reply; it is logged, never retried, and
    never raised to the polling loop.
    """

    def __init__(self, client: CompletionClient):
        self._client = client

    def dispatch(self, utterance_text: str) -> str:
        try:
            reply = self._client.generate(utterance_text)
        except requests.exceptions.Timeout:
            logger.error(f"Timeout while calling completion service at {self._client.url}")
            return ""
        except requests.exceptions.ConnectionError:
            logger.error(f"Connection error while calling completion service at {self._client.url}")
            return ""
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            logger.error(f"HTTP error {status} from completion service at {self._client.url}")
            return ""
        except requests.exceptions.RequestException as e:
            logger.error(f"Completion request failed: {e}")
            return ""

        if not reply:
            logger.warning("Completion service returned no response text")
        return reply
