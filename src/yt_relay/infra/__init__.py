"""Infrastructure layer — external system integration.

This layer wraps all interaction with yt-dlp, ffmpeg, the operating
system and the download directory.  Every raw subprocess or OS
exception must be caught here and re-raised as a
:class:`~yt_relay.exceptions.YtRelayError` subclass.

Rules
-----
* No imports from ``cli`` or ``web``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from yt_relay.infra.binaries import BinaryStatus, detect_ffmpeg, detect_ytdlp, require_ytdlp
from yt_relay.infra.tool_runner import SubprocessToolRunner
from yt_relay.infra.workspace import ArtifactWorkspace

__all__: list[str] = [
    "ArtifactWorkspace",
    "BinaryStatus",
    "SubprocessToolRunner",
    "detect_ffmpeg",
    "detect_ytdlp",
    "require_ytdlp",
]
