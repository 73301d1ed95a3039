"""Tool-output → :class:`VideoMetadata` parsing (pure).

yt-dlp may interleave warnings or other chatter with its JSON output.
The record used is the first line that fully parses as a JSON object,
not merely the first line that starts with ``{``.
"""

from __future__ import annotations

import json
import math
from typing import Any

from yt_relay.core.models import VideoMetadata
from yt_relay.exceptions import MetadataParseError

UNKNOWN: str = "Unknown"


def first_json_object(output: str) -> dict[str, Any]:
    """Return the first line of *output* that decodes to a JSON object.

    Raises
    ------
    MetadataParseError
        If no line decodes to a JSON object.
    """
    for line in output.splitlines():
        candidate = line.strip()
        if not candidate.startswith("{"):
            continue
        try:
            decoded: Any = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(decoded, dict):
            return decoded
    raise MetadataParseError("Tool output contained no JSON record.")


def _text_or_unknown(value: object) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return UNKNOWN


def _duration(value: object) -> int | float:
    # bool is an int subclass; "true" is not a duration.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value) or value <= 0:
        return 0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _optional_text(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def normalize_metadata(info: dict[str, Any]) -> VideoMetadata:
    """Convert a raw info dict into a :class:`VideoMetadata`.

    Missing or unusable fields fall back to ``"Unknown"`` (title,
    uploader) and ``0`` (duration); they never fail the attempt.
    """
    return VideoMetadata(
        title=_text_or_unknown(info.get("title")),
        duration=_duration(info.get("duration")),
        uploader=_text_or_unknown(info.get("uploader")),
        thumbnail=_optional_text(info.get("thumbnail")),
        webpage_url=_optional_text(info.get("webpage_url")),
    )


def parse_metadata(output: str) -> VideoMetadata:
    """Parse raw yt-dlp ``--dump-json`` output into normalized metadata."""
    return normalize_metadata(first_json_object(output))
