"""Configuration constants, accepted audio types, and .env loading.

WHY: Endpoint, model names, timeouts, and the accepted-file rules are plain
data that both the CLI and the HTTP server read. Keeping them in one module
means a new audio type or a new Whisper model is a one-line change.

HOW: python-dotenv loads the .env file on import. Constants are module-level
sets and strings; the network defaults can be overridden via environment
variables. load_api_key() gives a clear error when the key is missing.

RULES:
- ACCEPTED_AUDIO_TYPES and ACCEPTED_EXTENSIONS are both consulted by the
  pre-flight check; a file passes if EITHER matches
- Extensions are lowercase and include the leading dot
- API key is loaded from .env via python-dotenv, never hardcoded
- The credential is never logged
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Accepted audio input
# ---------------------------------------------------------------------------

ACCEPTED_AUDIO_TYPES: frozenset[str] = frozenset({
    "audio/mpeg",
    "audio/wav",
    "audio/mp3",
    "audio/x-m4a",
    "audio/m4a",
    "audio/ogg",
    "audio/flac",
    "audio/opus",
})
"""MIME types accepted without looking at the file name."""

ACCEPTED_EXTENSIONS: frozenset[str] = frozenset({
    ".mp3", ".wav", ".m4a", ".ogg", ".flac", ".opus",
})
"""Fallback when the MIME type is missing or mis-reported (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# API configuration defaults
# ---------------------------------------------------------------------------

GROQ_ENDPOINT = os.getenv(
    "GROQ_ENDPOINT", "https://api.groq.com/openai/v1/audio/transcriptions"
)
DEFAULT_MODEL = os.getenv("GROQ_DEFAULT_MODEL", "whisper-large-v3")
REQUEST_TIMEOUT_S = float(os.getenv("GROQ_TIMEOUT_S", "300"))
CONNECT_TIMEOUT_S = float(os.getenv("GROQ_CONNECT_TIMEOUT_S", "30"))

RESPONSE_FORMAT = "verbose_json"
"""Fixed: segment timing is only present in the verbose JSON shape."""


def find_api_key() -> str:
    """Return the Groq API key from the environment, or "" when unset.

    Callers that hand the key to the pipeline use this so a missing key is
    reported by the pre-flight validation like any other blank credential.
    """
    return os.getenv("GROQ_API_KEY", "").strip()


def load_api_key() -> str:
    """Load the Groq API key from the environment.

    WHY: Entry points that cannot proceed without a key (e.g. a server with
    no per-request credential) want a hard failure at startup.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = find_api_key()
    if not key:
        raise ValueError(
            "Groq API key not configured. "
            "Add GROQ_API_KEY to the .env file or pass --api-key."
        )
    return key
