"""Domain models for yt-relay.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access and simple rendering.  They carry zero I/O
and no dependencies on external packages.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

class Operation(enum.Enum):
    """The two acquisition operations the service performs."""

    METADATA = "info"
    EXTRACTION = "mp3"


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Strategy:
    """A named set of extractor parameters tried against yt-dlp.

    A strategy with no parameters is *unconstrained*: yt-dlp picks its
    own defaults and no ``--extractor-args`` flag is emitted.
    """

    name: str
    """Identifier used in logs and attempt records."""

    params: tuple[tuple[str, str], ...] = ()
    """Ordered ``key=value`` extractor parameters."""

    extractor: str = "youtube"
    """Extractor namespace the parameters apply to."""

    @classmethod
    def from_mapping(
        cls,
        name: str,
        params: Mapping[str, str],
        *,
        extractor: str = "youtube",
    ) -> Strategy:
        return cls(name=name, params=tuple(params.items()), extractor=extractor)

    @property
    def is_unconstrained(self) -> bool:
        return not self.params

    def extractor_args(self) -> str | None:
        """Render the value of yt-dlp's ``--extractor-args`` option.

        Returns ``None`` for an unconstrained strategy.
        """
        if self.is_unconstrained:
            return None
        rendered = ";".join(f"{key}={value}" for key, value in self.params)
        return f"{self.extractor}:{rendered}"


# ---------------------------------------------------------------------------
# Process-wide toolchain
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Toolchain:
    """External tool locations and per-operation settings.

    Resolved once at startup and shared read-only by every request.
    """

    ytdlp_command: tuple[str, ...]
    """Argument prefix that launches yt-dlp (a path, or ``python -m yt_dlp``)."""

    ffmpeg_location: Path | None = None
    """ffmpeg binary handed to yt-dlp, or ``None`` to let it search PATH."""

    cookie_file: Path | None = None
    """Non-empty cookie file, or ``None`` when no credentials are configured."""

    info_timeout: float = 30.0
    extract_timeout: float = 120.0
    audio_format: str = "mp3"
    audio_quality: str = "192K"

    def timeout_for(self, operation: Operation) -> float:
        if operation is Operation.METADATA:
            return self.info_timeout
        return self.extract_timeout


# ---------------------------------------------------------------------------
# Attempt records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Attempt:
    """Outcome of one strategy tried by the pipeline."""

    strategy: str
    operation: Operation
    url: str
    succeeded: bool
    diagnostic: str = ""
    artifacts: tuple[Path, ...] = ()
    """Workspace entries present when the attempt ended (before cleanup)."""


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class VideoMetadata:
    """Normalized metadata returned by ``GET /info``."""

    title: str
    """Human-readable title, ``"Unknown"`` when absent."""

    duration: int | float
    """Duration in seconds, ``0`` when absent."""

    uploader: str
    """Channel or uploader name, ``"Unknown"`` when absent."""

    thumbnail: str | None = None
    webpage_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready record, omitting absent optional fields."""
        data: dict[str, Any] = {
            "title": self.title,
            "duration": self.duration,
            "uploader": self.uploader,
        }
        if self.thumbnail:
            data["thumbnail"] = self.thumbnail
        if self.webpage_url:
            data["webpage_url"] = self.webpage_url
        return data


@dataclass(frozen=True, slots=True)
class AudioArtifact:
    """A finished audio file sitting in the workspace."""

    path: Path
    run_token: str
    download_name: str
    """User-visible filename, free of the run token's timestamp."""


@dataclass(frozen=True, slots=True)
class AcquisitionResult:
    """Successful pipeline outcome.

    ``payload`` is a :class:`VideoMetadata` for metadata fetches and an
    :class:`AudioArtifact` for extractions.  ``attempts`` lists every
    attempt in order, the last one being the success.
    """

    payload: VideoMetadata | AudioArtifact
    strategy: str
    attempts: tuple[Attempt, ...] = field(default_factory=tuple)
