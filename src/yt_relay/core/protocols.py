"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol


class ToolRunner(Protocol):
    """Contract for running an external executable.

    Any object that implements :meth:`invoke` with the correct signature
    satisfies this protocol structurally (no explicit inheritance
    required).
    """

    def invoke(self, args: Sequence[str], timeout: float) -> str:
        """Run *args* as an argument vector and return captured stdout.

        *args* is never joined into a shell command line.

        Raises
        ------
        ToolInvocationError
            On nonzero exit, timeout expiry, or spawn failure.
        """
        ...  # pragma: no cover


class ArtifactStore(Protocol):
    """Contract for the per-request download workspace."""

    def new_run_token(self) -> str:
        """Return a token unique across concurrent callers."""
        ...  # pragma: no cover

    def output_pattern(self, token: str) -> str:
        """Return the yt-dlp output template for files of *token*."""
        ...  # pragma: no cover

    def find_by_prefix(self, token: str, suffix: str) -> Path | None:
        """Return a finished file of *token* ending in *suffix*, if any."""
        ...  # pragma: no cover

    def entries(self, token: str) -> list[Path]:
        """Return every file currently owned by *token*."""
        ...  # pragma: no cover

    def purge(self, token: str) -> None:
        """Delete every file owned by *token*.  Never raises."""
        ...  # pragma: no cover

    def display_name(self, path: Path) -> str:
        """Return the user-visible filename for an artifact at *path*."""
        ...  # pragma: no cover
