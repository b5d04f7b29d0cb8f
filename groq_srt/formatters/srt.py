"""SRT encoder — validated segments to SubRip text.

WHY: SubRip is the lowest common denominator for subtitles: every player and
editor reads it. The only non-trivial part is timestamp rendering, where a
fraction like .9996 s must roll over into the next second instead of
printing a four-digit millisecond field.

HOW: format_timestamp() splits seconds into whole seconds and rounded
milliseconds, carries a rounded 1000 ms into the whole part, then derives
hours/minutes/seconds. encode_srt() numbers the segments it is given and
joins the blocks with one blank line.

RULES:
- Timestamp format is HH:MM:SS,mmm; the hours field grows past two digits
- Milliseconds round half up, then carry (59.9996 → 00:01:00,000)
- Block numbers are 1-based positions in the given sequence, so callers
  must filter first to keep numbering contiguous
- Output ends with exactly one newline; empty input gives ""
- Media type for SRT output: "application/x-subrip"
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

from groq_srt.core.segments import Segment

SRT_MEDIA_TYPE = "application/x-subrip"

_DEFAULT_STEM = "output"
_LAST_EXTENSION = re.compile(r"\.[^/.]+$")


def format_timestamp(seconds: float) -> str:
    """Convert a seconds offset to an SRT timestamp.

    Raises:
        ValueError: If seconds is negative or not finite.
    """
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError("Cannot format timestamp for {!r} seconds".format(seconds))

    whole = math.floor(seconds)
    millis = math.floor((seconds - whole) * 1000 + 0.5)
    if millis >= 1000:
        whole += 1
        millis = 0

    hours, remainder = divmod(whole, 3600)
    minutes, secs = divmod(remainder, 60)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


def encode_srt(segments: Sequence[Segment]) -> str:
    """Render already-filtered segments as an SRT document.

    Args:
        segments: Valid segments in display order.

    Returns:
        SRT text terminated by a single newline, or "" for no segments.
    """
    blocks = []
    for index, segment in enumerate(segments, 1):
        blocks.append("{}\n{} --> {}\n{}".format(
            index,
            format_timestamp(segment.start),
            format_timestamp(segment.end),
            segment.text.strip(),
        ))

    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def srt_filename(file_name: str) -> str:
    """Suggested download name for the subtitles of ``file_name``.

    ``talk.final.mp3`` → ``talk.final.srt``; a name with nothing left after
    removing the extension (``.mp3``, ``""``) → ``output.srt``.
    """
    base = re.split(r"[\\/]", file_name or "")[-1]
    stem = _LAST_EXTENSION.sub("", base)
    return "{}.srt".format(stem or _DEFAULT_STEM)
