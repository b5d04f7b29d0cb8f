"""Segment dataclass and the tolerant segment filter.

WHY: Whisper's verbose_json output occasionally contains entries with
missing timing, null text, or text that is only whitespace (silence, music
markers stripped by the API). Such entries would produce broken SRT blocks,
so they are dropped before encoding.

HOW: filter_segments walks the raw ``segments`` list in order and keeps the
entries whose ``start``/``end`` are finite numbers and whose ``text`` is a
non-blank string. Kept entries become immutable Segment objects.

RULES:
- Tolerant filter, not a validation gate: bad entries are skipped, never raised
- Input order is preserved
- Booleans are not accepted as timestamps even though bool subclasses int
- Integers too large for a float are dropped like non-finite values
- An empty result is a normal return value; the caller classifies it
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Segment:
    """One timed utterance from the transcription response.

    RULES:
    - start/end are float seconds from the beginning of the audio
    - text is kept as received; the SRT encoder trims it
    """

    start: float
    end: float
    text: str


def _is_timestamp(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _to_segment(raw: Any) -> Segment | None:
    if not isinstance(raw, Mapping):
        return None
    start = raw.get("start")
    end = raw.get("end")
    text = raw.get("text")
    if not (_is_timestamp(start) and _is_timestamp(end)):
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    return Segment(start=float(start), end=float(end), text=text)


def filter_segments(raw_segments: Iterable[Any]) -> List[Segment]:
    """Keep the well-formed, non-empty segments of a raw response list.

    Args:
        raw_segments: The ``segments`` array of a verbose_json response.

    Returns:
        Valid segments in their original order (possibly empty).
    """
    kept: List[Segment] = []
    dropped = 0
    for raw in raw_segments:
        segment = _to_segment(raw)
        if segment is None:
            dropped += 1
            continue
        kept.append(segment)

    if dropped:
        logger.debug("Dropped %d malformed or empty segment(s), kept %d", dropped, len(kept))
    return kept
