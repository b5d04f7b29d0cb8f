"""Groq SRT Converter — audio file to SubRip subtitles via Groq Whisper.

WHY: Groq's Whisper endpoint returns timed segments as JSON, but video
editors and players want an .srt file. This package turns one into the
other, with every failure classified by where it happened.

HOW: Three-stage pipeline of request (API client), filter (segment
validator) and encode (SRT formatter), sequenced by a small state machine
in pipeline.py. The CLI and the HTTP server are thin callers on top.

RULES:
- The pipeline returns Success | Failure; it never raises for expected failures
- The API key is a per-call argument; storage is the caller's concern
- Adding an output surface = one new caller module, no pipeline changes
"""

__version__ = "0.1.0"
