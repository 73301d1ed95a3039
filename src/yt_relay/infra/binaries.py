"""Infrastructure: yt-dlp / ffmpeg discovery and platform guidance.

Each tool is looked up once at startup: first at a short list of
well-known install locations, then on the search path.  When no yt-dlp
executable exists but the ``yt_dlp`` package is importable, yt-dlp runs
as ``python -m yt_dlp`` under the current interpreter.

Rules
-----
* Detection by filesystem probing and :func:`shutil.which` only; no
  subprocess is spawned here.
* No permanent PATH modification.
* No automatic installation.
* No ``print()``; callers handle user-facing output.
"""

from __future__ import annotations

import importlib.util
import os
import platform
import shutil
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from yt_relay.exceptions import BinaryNotFoundError

WELL_KNOWN_DIRS: tuple[str, ...] = ("/usr/local/bin", "/usr/bin")


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BinaryStatus:
    """Result of a binary detection probe.

    Attributes
    ----------
    name : str
        Tool name, e.g. ``"ffmpeg"``.
    found : bool
        Whether a runnable form of the tool was located.
    path : Path | None
        Absolute path to the executable, or ``None``.
    command : tuple[str, ...]
        Argument prefix that launches the tool.  Falls back to the bare
        tool name when nothing was found.
    version_hint : str
        Human-readable status string (e.g. ``"found at …"`` or ``"not found"``).
    install_commands : tuple[str, ...]
        Suggested shell commands for installing the tool on the current
        platform.  Empty when the tool is already present.
    """

    name: str
    found: bool
    path: Path | None
    command: tuple[str, ...]
    version_hint: str
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def _is_executable(candidate: Path) -> bool:
    return candidate.is_file() and os.access(candidate, os.X_OK)


def locate_executable(
    name: str,
    search_dirs: Sequence[str] = WELL_KNOWN_DIRS,
) -> Path | None:
    """Return the first executable *name* in *search_dirs*, then on PATH."""
    for directory in search_dirs:
        candidate = Path(directory) / name
        if _is_executable(candidate):
            return candidate
    found = shutil.which(name)
    if found is not None:
        return Path(found).resolve()
    return None


def detect_binary(
    name: str,
    override: Path | None = None,
    search_dirs: Sequence[str] = WELL_KNOWN_DIRS,
) -> BinaryStatus:
    """Probe for *name*, honouring an explicit *override* path first.

    Returns a :class:`BinaryStatus` regardless of whether the tool is
    present — the caller decides whether to abort or merely warn.
    """
    path: Path | None = None
    if override is not None and _is_executable(Path(override)):
        path = Path(override)
    if path is None:
        path = locate_executable(name, search_dirs)

    if path is not None:
        return BinaryStatus(
            name=name,
            found=True,
            path=path,
            command=(str(path),),
            version_hint=f"found at {path}",
            install_commands=(),
        )

    return BinaryStatus(
        name=name,
        found=False,
        path=None,
        command=(name,),
        version_hint="not found",
        install_commands=_platform_install_commands(name),
    )


def ytdlp_module_available() -> bool:
    """Return whether the ``yt_dlp`` package is importable."""
    try:
        return importlib.util.find_spec("yt_dlp") is not None
    except (ImportError, ValueError):
        return False


def detect_ytdlp(override: Path | None = None) -> BinaryStatus:
    """Probe for yt-dlp, falling back to the installed Python module."""
    status = detect_binary("yt-dlp", override)
    if status.found or not ytdlp_module_available():
        return status
    return BinaryStatus(
        name="yt-dlp",
        found=True,
        path=None,
        command=(sys.executable, "-m", "yt_dlp"),
        version_hint="python module",
        install_commands=(),
    )


def detect_ffmpeg(override: Path | None = None) -> BinaryStatus:
    """Probe for ffmpeg."""
    return detect_binary("ffmpeg", override)


def require_ytdlp(override: Path | None = None) -> tuple[str, ...]:
    """Return the yt-dlp command prefix or raise :class:`BinaryNotFoundError`."""
    status = detect_ytdlp(override)
    if not status.found:
        raise BinaryNotFoundError(
            "yt-dlp is not installed or not on PATH.",
            hint=_install_hint(status),
        )
    return status.command


def _install_hint(status: BinaryStatus) -> str | None:
    if not status.install_commands:
        return None
    lines = [f"Install {status.name} using one of:"]
    lines.extend(f"  {cmd}" for cmd in status.install_commands)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Platform-specific install guidance
# ---------------------------------------------------------------------------

def _platform_install_commands(name: str) -> tuple[str, ...]:
    """Return install commands for *name* appropriate for the current OS."""
    if name == "yt-dlp":
        return ("pip install --upgrade yt-dlp",)

    system = platform.system().lower()
    if system == "windows":
        return (
            "winget install Gyan.FFmpeg",
            "choco install ffmpeg",
        )
    if system == "linux":
        return (
            "sudo apt install ffmpeg",
            "sudo dnf install ffmpeg",
            "sudo pacman -S ffmpeg",
        )
    if system == "darwin":
        return ("brew install ffmpeg",)
    # Fallback — generic guidance.
    return ("Please install ffmpeg from https://ffmpeg.org/download.html",)
