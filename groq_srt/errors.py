"""Typed failures for the transcription-to-SRT pipeline.

WHY: A failed run has to say *where* it failed: before the upload, on the
wire, in the response shape, or while turning segments into subtitles. Each
place gets its own exception class so the orchestrator can classify a failure
with a single ``except PipelineError``.

HOW: Every class carries a ``stage`` class attribute (a FailureStage). The
orchestrator catches PipelineError at its boundary and turns it into a
Failure result; nothing below it has to know about results.

RULES:
- Raise the most specific subclass
- ``detail`` is the human-readable part; str(exc) is what callers display
- NetworkError always renders "<status> <reason>" when a status exists
"""

from __future__ import annotations

import enum
from typing import Optional


class FailureStage(str, enum.Enum):
    """Where in the pipeline a submission failed."""

    VALIDATION = "validation"
    NETWORK = "network"
    RESPONSE_FORMAT = "response_format"
    ENCODING = "encoding"


class PipelineError(Exception):
    """Base class for all classified pipeline failures."""

    stage: FailureStage = FailureStage.VALIDATION

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class ValidationError(PipelineError):
    """Raised by the pre-flight check: blank credential, empty or unsupported file."""

    stage = FailureStage.VALIDATION


class NetworkError(PipelineError):
    """Raised when the request could not be completed or returned non-2xx.

    WHY: Callers need the status code to tell an auth problem (401) from a
    rate limit (429) or an outage (5xx), and the API's own message to show
    the user.

    RULES:
    - status_code and reason are None for transport failures
    - detail is error.message from the body, or "Unknown error"
    """

    stage = FailureStage.NETWORK

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(detail)

    def __str__(self) -> str:
        if self.status_code is None:
            return "Error calling Groq API: {}".format(self.detail)
        status = " ".join(p for p in (str(self.status_code), self.reason) if p)
        return "Groq API request failed: {} {}".format(status, self.detail)


class ResponseFormatError(PipelineError):
    """Raised when a 2xx body has no usable ``segments`` list."""

    stage = FailureStage.RESPONSE_FORMAT


class EncodingError(PipelineError):
    """Raised when no segment survives filtering or the SRT text comes out empty."""

    stage = FailureStage.ENCODING
