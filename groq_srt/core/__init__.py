"""Core data model for transcription segments.

WHY: The Segment dataclass and the tolerant filter are the contract between
the API client's raw JSON and the SRT encoder.

RULES:
- Segments are immutable once filtered
- The filter never raises for malformed entries
"""
