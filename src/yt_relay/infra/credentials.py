"""Infrastructure: cookie-file bootstrap.

A cookie blob supplied through configuration is persisted once at
startup.  The resulting file is handed to yt-dlp only if it exists and
is non-empty; otherwise requests run without credentials, which is a
capability reduction rather than an error.
"""

from __future__ import annotations

from pathlib import Path

from yt_relay.logging import logger


def write_cookie_file(content: str, path: Path) -> Path:
    """Write *content* to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def usable_cookie_file(path: Path) -> Path | None:
    """Return *path* when it is a non-empty file, else ``None``."""
    try:
        if path.is_file() and path.stat().st_size > 0:
            return path
    except OSError:
        return None
    return None


def resolve_cookie_file(content: str | None, path: Path) -> Path | None:
    """Persist *content* (if any) and return the usable cookie file.

    A pre-existing non-empty file at *path* is reused when no content is
    configured.
    """
    if content and content.strip():
        write_cookie_file(content, path)
        logger.info("Cookie file created at {}", path)
    else:
        logger.warning("No cookie configured; restricted videos may fail")

    usable = usable_cookie_file(path)
    if usable is None:
        logger.debug("Cookie file {} missing or empty; running without credentials", path)
    return usable
