"""Groq transcription request and response dataclasses.

WHY: The client and the orchestrator pass the same handful of values around
(audio bytes, file name, model, optional language). Typed dataclasses make
those explicit and keep the raw JSON envelope parsing in one place.

HOW: TranscriptionRequest is built by the caller per submission.
TranscriptionResponse.from_dict() wraps a 2xx verbose_json body without
validating individual segments (that is the segment filter's job).

RULES:
- WhisperModel values are the exact Groq model ids
- language=None means "let the API auto-detect"; it is never sent as ""
- TranscriptionResponse.segments is None when the field is missing or is not
  a list; an empty list is kept as []
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class WhisperModel(str, enum.Enum):
    """Whisper models selectable on the Groq transcription endpoint."""

    DEFAULT = "whisper-large-v3"
    TURBO = "whisper-large-v3-turbo"

    @classmethod
    def parse(cls, value: str | WhisperModel) -> WhisperModel:
        """Accept a model id ("whisper-large-v3") or a short name ("turbo").

        Raises:
            ValueError: For anything else.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for model in cls:
            if key in (model.value, model.name.lower()):
                return model
        raise ValueError(
            "Unknown model '{}'. Choose one of: {}".format(
                value, ", ".join(m.name.lower() for m in cls)
            )
        )


@dataclass
class TranscriptionRequest:
    """One audio upload to the transcription endpoint.

    Attributes:
        audio_bytes: Raw file content, sent unchanged.
        file_name: Original file name; the API uses its extension to pick a decoder.
        model: Whisper model to run.
        language: ISO 639-1 code, or None for auto-detection.
        content_type: MIME type reported by the caller, if any.
    """

    audio_bytes: bytes
    file_name: str
    model: WhisperModel = WhisperModel.DEFAULT
    language: Optional[str] = None
    content_type: Optional[str] = None

    def form_fields(self) -> Dict[str, str]:
        """Non-file multipart fields, without ``response_format``."""
        fields = {"model": WhisperModel.parse(self.model).value}
        if self.language:
            fields["language"] = self.language
        return fields


@dataclass
class TranscriptionResponse:
    """Parsed 2xx body of a verbose_json transcription.

    RULES:
    - segments holds the raw dicts exactly as received
    - text/language/duration are informational and may be absent
    """

    segments: Optional[List[Any]]
    text: Optional[str] = None
    language: Optional[str] = None
    duration: Optional[float] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TranscriptionResponse:
        segments = data.get("segments")
        return cls(
            segments=segments if isinstance(segments, list) else None,
            text=data.get("text"),
            language=data.get("language"),
            duration=data.get("duration"),
            raw=data,
        )
