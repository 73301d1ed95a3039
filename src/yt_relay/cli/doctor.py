"""``yt-relay doctor`` — environment diagnostics command.

Gathers the same facts the server resolves at startup (tool locations,
cookie file, download directory) and renders them as a Rich table so an
operator can see why requests might fail before any are served.

This module lives in the CLI layer — it may import from ``infra`` and
``config``, and it renders via Rich.  It never writes the cookie file
or creates the download directory; it only reports.
"""

from __future__ import annotations

import os
import platform
import sys

from rich.table import Table

from yt_relay.cli import exit_codes
from yt_relay.cli.console import console
from yt_relay.config import Settings
from yt_relay.exceptions import BinaryNotFoundError
from yt_relay.infra.binaries import detect_ffmpeg, require_ytdlp
from yt_relay.infra.credentials import usable_cookie_file
from yt_relay.version import __version__

Check = tuple[str, str, str]

_OK = "[green]OK[/green]"
_WARN = "[yellow]WARN[/yellow]"
_FAIL = "[red]FAIL[/red]"


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _relay_version_check() -> Check:
    """Return (label, value, status) for the yt-relay version row."""
    return "yt-relay", __version__, _OK


def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = _OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _ytdlp_check(settings: Settings) -> Check:
    """Return (label, value, status) for the yt-dlp executable row."""
    try:
        command = require_ytdlp(settings.ytdlp_path)
    except BinaryNotFoundError:
        return "yt-dlp", "NOT INSTALLED", _FAIL
    return "yt-dlp", " ".join(command), _OK


def _ytdlp_module_check() -> Check:
    """Return (label, value, status) for the yt-dlp Python package row."""
    try:
        from yt_dlp.version import __version__ as ydl_ver
    except ImportError:
        return "yt-dlp module", "not importable", _WARN
    return "yt-dlp module", ydl_ver, _OK


def _ffmpeg_check(settings: Settings) -> Check:
    """Return (label, value, status) for the ffmpeg row."""
    status_obj = detect_ffmpeg(settings.ffmpeg_path)
    if status_obj.found:
        path_str = str(status_obj.path) if status_obj.path else "found"
        return "ffmpeg", path_str, _OK
    return "ffmpeg", "not found", _WARN


def _cookie_check(settings: Settings) -> Check:
    """Return (label, value, status) for the credentials row."""
    if settings.cookie and settings.cookie.strip():
        return "cookies", f"from environment -> {settings.cookie_file}", _OK
    if usable_cookie_file(settings.cookie_file) is not None:
        return "cookies", str(settings.cookie_file), _OK
    return "cookies", "none configured", _WARN


def _downloads_check(settings: Settings) -> Check:
    """Return (label, value, status) for the download directory row."""
    directory = settings.downloads_dir
    if directory.is_dir():
        if os.access(directory, os.W_OK):
            return "downloads", str(directory), _OK
        return "downloads", f"{directory} (read-only)", _FAIL
    # Created at server startup.
    return "downloads", f"{directory} (will be created)", _OK


def collect_checks(settings: Settings) -> list[Check]:
    """Run every diagnostic and return the rows in display order."""
    return [
        _relay_version_check(),
        _python_version_check(),
        _ytdlp_check(settings),
        _ytdlp_module_check(),
        _ffmpeg_check(settings),
        _cookie_check(settings),
        _downloads_check(settings),
    ]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings | None = None) -> int:
    """Execute all diagnostic checks and render a Rich summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    settings = settings or Settings()
    checks = collect_checks(settings)
    has_failure = any("FAIL" in status for _, _, status in checks)

    table = Table(
        title="yt-relay doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()

    try:
        require_ytdlp(settings.ytdlp_path)
    except BinaryNotFoundError as exc:
        console.print(f"[red]{exc}[/red]")
        if exc.hint:
            console.print(exc.hint)
        console.print()

    ffmpeg_status = detect_ffmpeg(settings.ffmpeg_path)
    if not ffmpeg_status.found and ffmpeg_status.install_commands:
        console.print("[yellow]ffmpeg is not installed; MP3 conversion will fail.[/yellow]")
        console.print("Install using one of the following commands:\n")
        for cmd in ffmpeg_status.install_commands:
            console.print(f"  [bold]{cmd}[/bold]")
        console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
