"""Shared test fixtures for the groq_srt test suite.

WHY: Client, pipeline, CLI, and server tests all need the same sample
verbose_json body and the same way of faking the Groq endpoint. Keeping
them here means every layer is tested against identical data.

HOW: SAMPLE_RESPONSE mirrors a real Groq verbose_json body (extra fields
included, since the pipeline must ignore them). make_transport() builds an
httpx.MockTransport that records every request and answers with a fixed
status and body. SpyClient stands in for GroqClient when a test only needs
to count calls.

RULES:
- No test ever reaches the real Groq API
- Recorded requests are fully read, so tests can inspect multipart bodies
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from groq_srt.api.client import GroqClient
from groq_srt.api.models import TranscriptionResponse


SAMPLE_RESPONSE: Dict[str, Any] = {
    "task": "transcribe",
    "language": "English",
    "duration": 7.48,
    "text": " Hello there. This is a test.",
    "segments": [
        {"id": 0, "seek": 0, "start": 0.0, "end": 2.5, "text": " Hello there.",
         "tokens": [50365, 2425], "temperature": 0.0, "avg_logprob": -0.21,
         "compression_ratio": 0.8, "no_speech_prob": 0.01},
        {"id": 1, "seek": 0, "start": 2.5, "end": 3.0, "text": "   ",
         "tokens": [], "temperature": 0.0, "avg_logprob": -1.1,
         "compression_ratio": 0.1, "no_speech_prob": 0.9},
        {"id": 2, "seek": 0, "start": 3.0, "end": 7.48, "text": " This is a test.",
         "tokens": [639, 307], "temperature": 0.0, "avg_logprob": -0.3,
         "compression_ratio": 0.9, "no_speech_prob": 0.02},
    ],
}

SAMPLE_SRT = (
    "1\n"
    "00:00:00,000 --> 00:00:02,500\n"
    "Hello there.\n"
    "\n"
    "2\n"
    "00:00:03,000 --> 00:00:07,480\n"
    "This is a test.\n"
)

FAKE_AUDIO = b"ID3\x04\x00fake mp3 payload"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, status_code: int = 200, body: Any = None, content: Optional[bytes] = None,
                 exc: Optional[Exception] = None) -> None:
        self.requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if exc is not None:
                raise exc
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=body)

        super().__init__(handler)


def make_transport(status_code: int = 200, body: Any = None, **kwargs: Any) -> RecordingTransport:
    """Transport answering every request with ``status_code`` and a JSON ``body``."""
    return RecordingTransport(status_code=status_code, body=body, **kwargs)


def client_factory_for(transport: httpx.AsyncBaseTransport):
    """A zero-argument GroqClient factory bound to a fake transport."""
    return lambda: GroqClient(transport=transport)


class SpyClient:
    """GroqClient stand-in that counts transcribe() calls."""

    def __init__(self, response: Optional[Dict[str, Any]] = None) -> None:
        self.calls = 0
        self._response = response if response is not None else SAMPLE_RESPONSE

    async def __aenter__(self) -> SpyClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        return None

    async def transcribe(self, request, credential) -> TranscriptionResponse:  # noqa: ANN001
        self.calls += 1
        return TranscriptionResponse.from_dict(self._response)


@pytest.fixture
def sample_response() -> Dict[str, Any]:
    """A fresh copy of the verbose_json sample body."""
    return json.loads(json.dumps(SAMPLE_RESPONSE))


@pytest.fixture
def spy_client() -> SpyClient:
    return SpyClient()
