"""Tests for yt-dlp argument construction (core/command.py)."""

from __future__ import annotations

from pathlib import Path

import pytest

from yt_relay.core.command import (
    build_arguments,
    extraction_arguments,
    metadata_arguments,
)
from yt_relay.core.models import Operation, Strategy, Toolchain

URL = "https://www.youtube.com/watch?v=abc123"
IOS = Strategy.from_mapping("ios", {"player_client": "ios"})
DEFAULT = Strategy(name="default")


def _value_after(argv: list[str], flag: str) -> str:
    return argv[argv.index(flag) + 1]


class TestMetadataArguments:
    def test_shape(self, toolchain: Toolchain) -> None:
        argv = metadata_arguments(toolchain, IOS, URL)

        assert argv[0] == "/usr/bin/yt-dlp"
        assert _value_after(argv, "--extractor-args") == "youtube:player_client=ios"
        assert _value_after(argv, "--ffmpeg-location") == "/usr/bin/ffmpeg"
        assert "--skip-download" in argv
        assert "--dump-json" in argv
        assert "--no-playlist" in argv
        assert argv[-2:] == ["--", URL]

    def test_unconstrained_strategy_has_no_extractor_args(self, toolchain: Toolchain) -> None:
        assert "--extractor-args" not in metadata_arguments(toolchain, DEFAULT, URL)

    def test_cookie_file_included_when_configured(self) -> None:
        toolchain = Toolchain(ytdlp_command=("yt-dlp",), cookie_file=Path("/srv/cookies.txt"))
        argv = metadata_arguments(toolchain, IOS, URL)
        assert _value_after(argv, "--cookies") == "/srv/cookies.txt"

    def test_no_cookie_or_ffmpeg_flags_when_absent(self) -> None:
        argv = metadata_arguments(Toolchain(ytdlp_command=("yt-dlp",)), IOS, URL)
        assert "--cookies" not in argv
        assert "--ffmpeg-location" not in argv

    def test_module_command_prefix(self) -> None:
        toolchain = Toolchain(ytdlp_command=("/usr/bin/python3", "-m", "yt_dlp"))
        argv = metadata_arguments(toolchain, IOS, URL)
        assert argv[:3] == ["/usr/bin/python3", "-m", "yt_dlp"]


class TestExtractionArguments:
    def test_shape(self, toolchain: Toolchain) -> None:
        argv = extraction_arguments(toolchain, IOS, URL, "/tmp/dl/tok.%(ext)s")

        assert _value_after(argv, "-f") == "bestaudio/best"
        assert "-x" in argv
        assert _value_after(argv, "--audio-format") == "mp3"
        assert _value_after(argv, "--audio-quality") == "192K"
        assert _value_after(argv, "-o") == "/tmp/dl/tok.%(ext)s"
        assert argv[-2:] == ["--", URL]

    def test_hostile_url_stays_one_argument(self, toolchain: Toolchain) -> None:
        hostile = "https://x.test/?a=$(id)&b=`ls`; --exec rm"
        argv = extraction_arguments(toolchain, IOS, hostile, "/tmp/t.%(ext)s")
        assert argv[-1] == hostile
        assert argv.count(hostile) == 1


class TestBuildArguments:
    def test_dispatch(self, toolchain: Toolchain) -> None:
        assert build_arguments(Operation.METADATA, toolchain, IOS, URL) == metadata_arguments(
            toolchain, IOS, URL
        )
        assert build_arguments(
            Operation.EXTRACTION, toolchain, IOS, URL, output_pattern="/t.%(ext)s"
        ) == extraction_arguments(toolchain, IOS, URL, "/t.%(ext)s")

    def test_extraction_without_pattern_rejected(self, toolchain: Toolchain) -> None:
        with pytest.raises(ValueError, match="output pattern"):
            build_arguments(Operation.EXTRACTION, toolchain, IOS, URL)
