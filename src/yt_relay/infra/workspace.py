"""Artifact workspace — the shared download directory.

Every request works under its own run token.  Tokens combine a
nanosecond timestamp with a random UUID fragment, so concurrent
requests never share a filename prefix even when they start in the
same clock tick.
"""

from __future__ import annotations

import time
import uuid
from pathlib import Path

from yt_relay.logging import logger

# Written by yt-dlp while a download or merge is still in flight.
_INCOMPLETE_SUFFIXES: tuple[str, ...] = (".part", ".ytdl", ".temp")


class ArtifactWorkspace:
    """Concrete :class:`~yt_relay.core.protocols.ArtifactStore` on a local directory.

    Parameters
    ----------
    root:
        Download directory.  Created (with parents) if absent.
    prefix:
        Leading part of every run token; also the stem of the
        user-visible filename.
    """

    def __init__(self, root: Path, *, prefix: str = "audio") -> None:
        self._root: Path = Path(root)
        self._prefix: str = prefix
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Tokens and templates
    # ------------------------------------------------------------------

    def new_run_token(self) -> str:
        """Return ``<prefix>_<time_ns>_<12 hex chars>``."""
        return f"{self._prefix}_{time.time_ns()}_{uuid.uuid4().hex[:12]}"

    def output_pattern(self, token: str) -> str:
        """Return the yt-dlp ``-o`` template for *token*."""
        return str(self._root / f"{token}.%(ext)s")

    def display_name(self, path: Path) -> str:
        """Return ``<prefix><ext>``, e.g. ``audio.mp3``."""
        return f"{self._prefix}{path.suffix}"

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def entries(self, token: str) -> list[Path]:
        """Return every file whose name starts with *token*, sorted."""
        try:
            return sorted(
                path
                for path in self._root.iterdir()
                if path.name.startswith(token) and path.is_file()
            )
        except OSError:
            return []

    def find_by_prefix(self, token: str, suffix: str) -> Path | None:
        """Return a finished file for *token* ending with *suffix*.

        The exact ``<token><suffix>`` name wins; otherwise the first
        sorted match is returned, since yt-dlp may insert format ids or
        rename during post-processing.
        """
        exact = self._root / f"{token}{suffix}"
        if exact.is_file():
            return exact
        for path in self.entries(token):
            if path.name.endswith(_INCOMPLETE_SUFFIXES):
                continue
            if path.name.endswith(suffix):
                return path
        return None

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def purge(self, token: str) -> None:
        """Delete every file of *token*.  Errors are logged, never raised."""
        for path in self.entries(token):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.debug("could not delete {}: {}", path, exc)
