"""FastAPI application exposing the audio-to-SRT pipeline over HTTP.

WHY: Scripts, automations, and other services want the same conversion the
CLI does without shelling out. A single synchronous endpoint fits: one
upload in, one .srt file (or one classified error) out.

HOW: POST /transcriptions reads the multipart upload, takes the API key
from the Authorization header (falling back to GROQ_API_KEY), and awaits
one PipelineOrchestrator.submit(). Success returns the SRT as an
attachment; Failure maps its stage to an HTTP status and an ErrorResponse.

RULES:
- Every request runs its own orchestrator; nothing is stored between requests
- Status mapping: validation → 400, encoding → 422, network and
  response_format → 502
- Uploaded file names are reduced to their basename
- The API key is never logged
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, List, Optional
from urllib.parse import quote

from fastapi import FastAPI, File, Form, Header, UploadFile
from fastapi.responses import JSONResponse, Response

from groq_srt import __version__
from groq_srt.api.client import GroqClient
from groq_srt.api.models import WhisperModel
from groq_srt.config import find_api_key
from groq_srt.errors import FailureStage
from groq_srt.formatters.srt import SRT_MEDIA_TYPE, srt_filename
from groq_srt.pipeline import Failure, PipelineOrchestrator
from groq_srt.server.models import ErrorResponse, HealthResponse, ModelInfo

logger = logging.getLogger(__name__)

_STATUS_BY_STAGE = {
    FailureStage.VALIDATION: 400,
    FailureStage.NETWORK: 502,
    FailureStage.RESPONSE_FORMAT: 502,
    FailureStage.ENCODING: 422,
}

app = FastAPI(
    title="Groq SRT Converter API",
    description=(
        "Upload an audio file, get SubRip (.srt) subtitles back. Transcription "
        "is done by the Groq Whisper API with the caller's API key."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _client_factory() -> GroqClient:
    """Build the Groq client for one request (patched in tests)."""
    return GroqClient()


def _credential_from_header(authorization: Optional[str]) -> str:
    """Extract the key from an ``Authorization: Bearer <key>`` header.

    Falls back to GROQ_API_KEY when the header is absent or not a Bearer
    token; returns "" when neither is set so validation reports it.
    """
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    return find_api_key()


def _attachment_header(filename: str) -> str:
    """Content-Disposition for a download, safe for any upload name.

    RULES:
    - filename= carries a printable-ASCII fallback without quotes or backslashes
    - filename*= carries the full UTF-8 name, percent-encoded (RFC 5987)
    """
    ascii_fallback = "".join(
        char if 32 <= ord(char) < 127 and char not in {'"', "\\"} else "_"
        for char in filename
    )
    return "attachment; filename=\"{}\"; filename*=UTF-8''{}".format(
        ascii_fallback, quote(filename, safe="")
    )


def _failure_response(failure: Failure) -> JSONResponse:
    body = ErrorResponse(
        stage=failure.stage.value,
        detail=failure.detail,
        failed_in=failure.failed_in.value,
    )
    return JSONResponse(status_code=_STATUS_BY_STAGE[failure.stage], content=body.model_dump())


# ---------------------------------------------------------------------------
# Endpoints: Transcriptions
# ---------------------------------------------------------------------------


@app.post(
    "/transcriptions",
    tags=["transcriptions"],
    summary="Convert an audio file to SRT subtitles",
    description=(
        "Upload an audio file (.mp3, .wav, .m4a, .ogg, .flac, .opus). The file "
        "is transcribed by Groq Whisper and returned as an .srt attachment. "
        "Send your Groq key as 'Authorization: Bearer <key>'."
    ),
    response_class=Response,
    responses={
        200: {
            "content": {SRT_MEDIA_TYPE: {}},
            "description": "SRT subtitles as an attachment",
        },
        400: {"model": ErrorResponse, "description": "Missing API key, empty or unsupported file"},
        422: {"model": ErrorResponse, "description": "No usable segments in the transcription"},
        502: {"model": ErrorResponse, "description": "Groq API failed or returned an invalid body"},
    },
)
async def create_transcription(
    file: Annotated[
        UploadFile,
        File(description="Audio file to transcribe"),
    ],
    model: Annotated[
        str,
        Form(description="Whisper model: 'default', 'turbo', or a full model id."),
    ] = WhisperModel.DEFAULT.value,
    language: Annotated[
        Optional[str],
        Form(description="Spoken language ISO 639-1 code. Omit to auto-detect."),
    ] = None,
    authorization: Annotated[
        Optional[str],
        Header(description="Bearer token carrying the Groq API key."),
    ] = None,
) -> Response:
    # Sanitize filename to prevent path traversal
    filename = Path(file.filename or "").name
    content = await file.read()

    orchestrator = PipelineOrchestrator(client_factory=_client_factory)
    result = await orchestrator.submit(
        content,
        filename,
        _credential_from_header(authorization),
        model=model,
        language=language,
        content_type=file.content_type,
    )

    if isinstance(result, Failure):
        logger.info(
            "Conversion of %s failed in %s (%s)",
            filename, result.failed_in.value, result.stage.value,
        )
        return _failure_response(result)

    logger.info("Converted %s (%d bytes of SRT)", filename, len(result.srt_text))
    return Response(
        content=result.srt_text,
        media_type=SRT_MEDIA_TYPE,
        headers={
            "Content-Disposition": _attachment_header(srt_filename(filename)),
        },
    )


# ---------------------------------------------------------------------------
# Endpoints: Models
# ---------------------------------------------------------------------------


@app.get(
    "/models",
    response_model=List[ModelInfo],
    tags=["models"],
    summary="List selectable Whisper models",
)
async def list_models() -> List[ModelInfo]:
    return [ModelInfo(key=m.name.lower(), id=m.value) for m in WhisperModel]


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the groq-srt-server console script."""
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
