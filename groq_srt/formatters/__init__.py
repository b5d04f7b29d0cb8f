"""Subtitle output formatters.

WHY: Keeps text rendering apart from transport and sequencing, so the
encoder can be tested with nothing but Segment objects.
"""

from groq_srt.formatters.srt import SRT_MEDIA_TYPE, encode_srt, format_timestamp, srt_filename

__all__ = ["SRT_MEDIA_TYPE", "encode_srt", "format_timestamp", "srt_filename"]
