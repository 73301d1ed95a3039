"""yt-dlp argument-vector construction (pure).

Every vector ends with ``--`` followed by the target URL, so a
user-supplied value is never parsed as an option and never reaches a
shell.
"""

from __future__ import annotations

from yt_relay.core.models import Operation, Strategy, Toolchain


def base_arguments(toolchain: Toolchain, strategy: Strategy) -> list[str]:
    """Flags shared by every attempt, including the strategy's parameters."""
    args: list[str] = [*toolchain.ytdlp_command, "--no-warnings"]
    if toolchain.ffmpeg_location is not None:
        args += ["--ffmpeg-location", str(toolchain.ffmpeg_location)]
    extractor_args = strategy.extractor_args()
    if extractor_args is not None:
        args += ["--extractor-args", extractor_args]
    args.append("--no-check-certificate")
    if toolchain.cookie_file is not None:
        args += ["--cookies", str(toolchain.cookie_file)]
    args.append("--no-playlist")
    return args


def metadata_arguments(toolchain: Toolchain, strategy: Strategy, url: str) -> list[str]:
    """Arguments that print the info JSON without downloading anything."""
    return [
        *base_arguments(toolchain, strategy),
        "--skip-download",
        "--dump-json",
        "--",
        url,
    ]


def extraction_arguments(
    toolchain: Toolchain,
    strategy: Strategy,
    url: str,
    output_pattern: str,
) -> list[str]:
    """Arguments that download the best audio and transcode it."""
    return [
        *base_arguments(toolchain, strategy),
        "-f",
        "bestaudio/best",
        "-x",
        "--audio-format",
        toolchain.audio_format,
        "--audio-quality",
        toolchain.audio_quality,
        "-o",
        output_pattern,
        "--",
        url,
    ]


def build_arguments(
    operation: Operation,
    toolchain: Toolchain,
    strategy: Strategy,
    url: str,
    *,
    output_pattern: str | None = None,
) -> list[str]:
    """Dispatch to the argument builder for *operation*.

    Raises
    ------
    ValueError
        If *operation* is extraction and no *output_pattern* is given.
    """
    if operation is Operation.METADATA:
        return metadata_arguments(toolchain, strategy, url)
    if output_pattern is None:
        raise ValueError("extraction requires an output pattern")
    return extraction_arguments(toolchain, strategy, url, output_pattern)
