"""Groq API client package — async HTTP interface to Groq audio transcription.

WHY: The converter needs to upload an audio file and get back timed
segments. This package encapsulates all Groq API communication behind an
async client class.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. Request and response
shapes are typed dataclasses defined in models.py.

RULES:
- All HTTP calls go through GroqClient (no direct httpx usage elsewhere)
- Authentication is via Bearer token supplied per call
"""

from groq_srt.api.client import GroqClient
from groq_srt.api.models import TranscriptionRequest, TranscriptionResponse, WhisperModel

__all__ = ["GroqClient", "TranscriptionRequest", "TranscriptionResponse", "WhisperModel"]
