"""Pipeline orchestrator — audio upload to SRT text as one state machine.

WHY: Callers (CLI, HTTP server) need a single call that turns an audio file
into subtitles and a single value that says whether it worked and, if not,
where it broke. Threading four failure kinds through every caller would be
easy to get wrong, so the orchestrator owns the sequencing and returns a
tagged result instead of raising.

HOW: submit() walks the states
  idle → validating → requesting → transcribing → succeeded
and drops into ``failed`` from any of the middle three. Each stage raises a
PipelineError subclass on failure; submit() catches it at the boundary and
returns Failure(stage, detail, failed_in). An optional on_state callback
is invoked on every transition so callers can render progress.

RULES:
- Pre-flight validation runs before any network call
- File type passes if the MIME type OR the extension is accepted
- Missing and empty ``segments`` are both response_format failures
- Zero valid segments after filtering is an encoding failure
- One request per submit; no retries, caching, or persistence
- One in-flight submit per orchestrator; callers check is_busy
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from groq_srt.api.client import GroqClient
from groq_srt.api.models import TranscriptionRequest, WhisperModel
from groq_srt.config import ACCEPTED_AUDIO_TYPES, ACCEPTED_EXTENSIONS
from groq_srt.core.segments import filter_segments
from groq_srt.errors import (
    EncodingError,
    FailureStage,
    PipelineError,
    ResponseFormatError,
    ValidationError,
)
from groq_srt.formatters.srt import encode_srt

logger = logging.getLogger(__name__)


class PipelineState(str, enum.Enum):
    """Lifecycle of one submission.

    RULES:
    - idle: nothing submitted yet (or a new submit is starting)
    - validating: pre-flight checks on credential and file
    - requesting: upload in flight, waiting for the API
    - transcribing: response received, filtering and encoding segments
    - succeeded / failed: terminal for the current submission
    """

    IDLE = "idle"
    VALIDATING = "validating"
    REQUESTING = "requesting"
    TRANSCRIBING = "transcribing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_RESTING_STATES = frozenset({PipelineState.IDLE, PipelineState.SUCCEEDED, PipelineState.FAILED})


@dataclass(frozen=True)
class Success:
    """Subtitles produced; ``srt_text`` is never empty."""

    srt_text: str
    ok = True


@dataclass(frozen=True)
class Failure:
    """Submission failed.

    Attributes:
        stage: Kind of failure (validation, network, response_format, encoding).
        detail: Message suitable for showing to the user.
        failed_in: The state the pipeline was in when it failed.
    """

    stage: FailureStage
    detail: str
    failed_in: PipelineState
    ok = False


TranscriptionResult = Union[Success, Failure]

ClientFactory = Callable[[], GroqClient]
StateCallback = Callable[[PipelineState], None]


def is_accepted_audio(file_name: str, content_type: Optional[str]) -> bool:
    """True if the MIME type or the file extension marks this as supported audio."""
    if content_type and content_type.split(";")[0].strip().lower() in ACCEPTED_AUDIO_TYPES:
        return True
    return (file_name or "").lower().endswith(tuple(ACCEPTED_EXTENSIONS))


def validate_submission(
    file_bytes: bytes,
    file_name: str,
    credential: Optional[str],
    content_type: Optional[str] = None,
) -> None:
    """Pre-flight checks, in the order a user would fix them.

    Raises:
        ValidationError: Blank credential, empty file, or unsupported type.
    """
    if not credential or not credential.strip():
        raise ValidationError("Please provide a Groq API key.")
    if not file_bytes:
        raise ValidationError("Uploaded audio file is empty. Please select a valid file.")
    if not is_accepted_audio(file_name, content_type):
        raise ValidationError(
            "Unsupported audio file '{}'. Accepted formats: {}".format(
                file_name, ", ".join(sorted(ACCEPTED_EXTENSIONS))
            )
        )


class PipelineOrchestrator:
    """Runs one submission at a time through validate → request → encode.

    WHY: Keeps the state machine and the failure classification in one
    place so every caller gets identical behavior.

    HOW: A client factory (default: GroqClient with config defaults) is
    called once per submit, so each submission owns its own connection.

    RULES:
    - state is read-only outside this class
    - on_state, when given, is called with each new state, in order
    """

    def __init__(
        self,
        client_factory: Optional[ClientFactory] = None,
        on_state: Optional[StateCallback] = None,
    ) -> None:
        self._client_factory = client_factory or GroqClient
        self._on_state = on_state
        self._state = PipelineState.IDLE

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def is_busy(self) -> bool:
        """True while a submission is between idle and a terminal state."""
        return self._state not in _RESTING_STATES

    def _transition(self, state: PipelineState) -> None:
        logger.debug("Pipeline %s -> %s", self._state.value, state.value)
        self._state = state
        if self._on_state:
            self._on_state(state)

    async def submit(
        self,
        file_bytes: bytes,
        file_name: str,
        credential: Optional[str],
        model: Union[WhisperModel, str] = WhisperModel.DEFAULT,
        language: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> TranscriptionResult:
        """Transcribe one audio file and return its SRT text or a classified failure.

        Args:
            file_bytes: Raw audio file content.
            file_name: Original file name (used for type fallback and upload).
            credential: Groq API key.
            model: WhisperModel or a name accepted by WhisperModel.parse().
            language: ISO 639-1 code, or None/"" for auto-detection.
            content_type: MIME type reported by the caller, if known.

        Returns:
            Success with SRT text, or Failure with stage, detail, and failed_in.
        """
        self._transition(PipelineState.IDLE)
        self._transition(PipelineState.VALIDATING)
        try:
            validate_submission(file_bytes, file_name, credential, content_type)
            try:
                whisper_model = WhisperModel.parse(model)
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc

            request = TranscriptionRequest(
                audio_bytes=file_bytes,
                file_name=file_name,
                model=whisper_model,
                language=(language or "").strip() or None,
                content_type=content_type,
            )

            self._transition(PipelineState.REQUESTING)
            async with self._client_factory() as client:
                response = await client.transcribe(request, credential)

            if not response.segments:
                raise ResponseFormatError("Groq API response invalid; no segments found.")

            self._transition(PipelineState.TRANSCRIBING)
            srt_text = _encode(response.segments)
        except PipelineError as exc:
            failed_in = self._state
            self._transition(PipelineState.FAILED)
            return Failure(stage=exc.stage, detail=str(exc), failed_in=failed_in)

        self._transition(PipelineState.SUCCEEDED)
        return Success(srt_text=srt_text)


def _encode(raw_segments: List[Any]) -> str:
    """Filter and encode; raises EncodingError when nothing usable remains."""
    segments = filter_segments(raw_segments)
    if not segments:
        raise EncodingError("Could not generate valid SRT content from transcription.")
    try:
        srt_text = encode_srt(segments)
    except ValueError as exc:
        raise EncodingError("SRT conversion failed: {}".format(exc)) from exc
    if not srt_text:
        raise EncodingError("SRT conversion failed.")
    return srt_text


async def transcribe_to_srt(
    file_bytes: bytes,
    file_name: str,
    credential: Optional[str],
    model: Union[WhisperModel, str] = WhisperModel.DEFAULT,
    language: Optional[str] = None,
    content_type: Optional[str] = None,
    client_factory: Optional[ClientFactory] = None,
) -> TranscriptionResult:
    """One-shot convenience: a fresh orchestrator, one submit."""
    orchestrator = PipelineOrchestrator(client_factory=client_factory)
    return await orchestrator.submit(
        file_bytes,
        file_name,
        credential,
        model=model,
        language=language,
        content_type=content_type,
    )
