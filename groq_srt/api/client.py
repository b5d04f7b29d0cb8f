"""Async HTTP client for the Groq audio transcription endpoint.

WHY: The pipeline needs exactly one thing from the network: upload an audio
file with a model choice and get back the verbose_json transcription. This
module hides the multipart shape, the auth header, and the error envelope
so the orchestrator only deals with typed results and typed errors.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. GroqClient is an async
context manager: enter it to open the connection pool, exit to close it.
transcribe() sends one multipart POST and either returns a
TranscriptionResponse or raises a PipelineError subclass.

RULES:
- Always use the async context manager (async with GroqClient() as client:)
- response_format is always "verbose_json"; callers cannot change it
- "language" is sent only when the request sets one
- One POST per call, no retries; retry policy belongs to the caller
- Non-2xx → NetworkError carrying status, reason, and error.message when present
- The credential is sent per call and never logged
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from groq_srt.api.models import TranscriptionRequest, TranscriptionResponse
from groq_srt.config import (
    CONNECT_TIMEOUT_S,
    GROQ_ENDPOINT,
    REQUEST_TIMEOUT_S,
    RESPONSE_FORMAT,
)
from groq_srt.errors import NetworkError, ResponseFormatError

logger = logging.getLogger(__name__)

_UNKNOWN_ERROR = "Unknown error"
_FALLBACK_CONTENT_TYPE = "application/octet-stream"


class GroqClient:
    """Async client for the Groq OpenAI-compatible transcription API.

    WHY: Provides a typed interface for the single upload-and-transcribe
    call, with configurable timeouts because long audio can take minutes.

    HOW: Wraps httpx.AsyncClient. The Authorization header is built per
    call from the credential argument, so one client never holds a key.

    RULES:
    - Use as: async with GroqClient() as client: ...
    - endpoint defaults to GROQ_ENDPOINT from config
    - timeout / connect_timeout default to the config values (seconds)
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        connect_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._endpoint = endpoint or GROQ_ENDPOINT
        self._timeout = httpx.Timeout(
            timeout if timeout is not None else REQUEST_TIMEOUT_S,
            connect=connect_timeout if connect_timeout is not None else CONNECT_TIMEOUT_S,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GroqClient:
        self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "GroqClient must be used as an async context manager: "
                "async with GroqClient() as client: ..."
            )
        return self._client

    async def transcribe(
        self,
        request: TranscriptionRequest,
        credential: str,
    ) -> TranscriptionResponse:
        """Upload the audio and return the parsed transcription envelope.

        HOW: Builds the multipart body (file + model + response_format +
        optional language), POSTs it with a Bearer token, then classifies
        the response.

        Args:
            request: Audio bytes, file name, model, and optional language.
            credential: Groq API key; surrounding whitespace is ignored.

        Returns:
            TranscriptionResponse for any 2xx JSON object body.

        Raises:
            NetworkError: Transport failure, timeout, or non-2xx status.
            ResponseFormatError: 2xx whose body is not a JSON object.
        """
        client = self._ensure_client()

        data = request.form_fields()
        data["response_format"] = RESPONSE_FORMAT
        files = {
            "file": (
                request.file_name,
                request.audio_bytes,
                request.content_type or _FALLBACK_CONTENT_TYPE,
            ),
        }

        logger.debug(
            "POST %s file=%s bytes=%d model=%s language=%s",
            self._endpoint,
            request.file_name,
            len(request.audio_bytes),
            data["model"],
            data.get("language", "auto"),
        )

        try:
            resp = await client.post(
                self._endpoint,
                data=data,
                files=files,
                headers={"Authorization": "Bearer {}".format(credential.strip())},
            )
        except httpx.HTTPError as exc:
            raise NetworkError(str(exc) or type(exc).__name__) from exc

        logger.debug("Groq responded %d %s", resp.status_code, resp.reason_phrase)

        if not resp.is_success:
            raise NetworkError(
                _error_detail(resp),
                status_code=resp.status_code,
                reason=resp.reason_phrase,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise ResponseFormatError(
                "Groq API response invalid; body is not JSON."
            ) from exc

        if not isinstance(body, dict):
            raise ResponseFormatError("Groq API response invalid; expected a JSON object.")

        return TranscriptionResponse.from_dict(body)


def _error_detail(resp: httpx.Response) -> str:
    """Best-effort human-readable message from an error response body.

    RULES:
    - Uses error.message from a JSON body when it is a non-empty string
    - Anything else (HTML, empty body, other JSON shapes) → "Unknown error"
    """
    try:
        body: Any = resp.json()
    except ValueError:
        return _UNKNOWN_ERROR

    error = body.get("error") if isinstance(body, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if isinstance(message, str) and message.strip():
        return message.strip()
    return _UNKNOWN_ERROR
