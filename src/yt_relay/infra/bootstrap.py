"""Infrastructure: one-time process bootstrap.

Turns :class:`~yt_relay.config.Settings` into the immutable objects the
pipeline runs on.  Called once per process; nothing here is re-read per
request.
"""

from __future__ import annotations

from yt_relay.config import Settings
from yt_relay.core.catalog import default_catalog
from yt_relay.core.models import Toolchain
from yt_relay.core.pipeline import AcquisitionPipeline
from yt_relay.infra.binaries import detect_ffmpeg, detect_ytdlp
from yt_relay.infra.credentials import resolve_cookie_file
from yt_relay.infra.tool_runner import SubprocessToolRunner
from yt_relay.infra.workspace import ArtifactWorkspace
from yt_relay.logging import logger


def build_toolchain(settings: Settings) -> Toolchain:
    """Resolve tool locations and credentials into a :class:`Toolchain`."""
    ytdlp = detect_ytdlp(settings.ytdlp_path)
    ffmpeg = detect_ffmpeg(settings.ffmpeg_path)
    logger.info("[yt-dlp] using: {}", " ".join(ytdlp.command))
    if ffmpeg.found:
        logger.info("[ffmpeg] using: {}", ffmpeg.path)
    else:
        logger.warning("[ffmpeg] not found; yt-dlp will search PATH")

    return Toolchain(
        ytdlp_command=ytdlp.command,
        ffmpeg_location=ffmpeg.path,
        cookie_file=resolve_cookie_file(settings.cookie, settings.cookie_file),
        info_timeout=settings.info_timeout,
        extract_timeout=settings.extract_timeout,
        audio_format=settings.audio_format,
        audio_quality=settings.audio_quality,
    )


def build_pipeline(settings: Settings) -> AcquisitionPipeline:
    """Wire the production pipeline from *settings*."""
    workspace = ArtifactWorkspace(settings.downloads_dir)
    catalog = default_catalog(settings.client_names(), player_skip=settings.player_skip)
    return AcquisitionPipeline(
        runner=SubprocessToolRunner(),
        workspace=workspace,
        catalog=catalog,
        toolchain=build_toolchain(settings),
    )
