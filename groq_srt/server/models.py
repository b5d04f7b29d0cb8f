"""Pydantic response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for response serialization
and automatic OpenAPI documentation. Failures in particular must have one
stable shape so clients can branch on ``stage``.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- ErrorResponse.stage values match groq_srt.errors.FailureStage exactly
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body for a failed conversion or a rejected request.

    RULES:
    - stage is one of validation, network, response_format, encoding
    - failed_in is the pipeline state at failure time, when known
    """

    stage: str = Field(description="Failure classification.")
    detail: str = Field(description="Human-readable error description.")
    failed_in: Optional[str] = Field(
        default=None,
        description="Pipeline state in which the failure happened.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "stage": "network",
                "detail": "Groq API request failed: 401 Unauthorized invalid api key",
                "failed_in": "requesting",
            }
        ]
    }}


class ModelInfo(BaseModel):
    """One selectable Whisper model."""

    key: str = Field(description="Short name accepted in the 'model' form field.")
    id: str = Field(description="Groq model identifier.")


class HealthResponse(BaseModel):
    """Health check response.

    WHY: Load balancers and orchestrators need a simple endpoint
    to verify the service is alive and ready.
    """

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
