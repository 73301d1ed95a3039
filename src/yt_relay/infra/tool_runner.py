"""Subprocess-backed implementation of :class:`~yt_relay.core.protocols.ToolRunner`.

This module is the **only** place in the codebase that spawns external
processes.  Every subprocess failure is caught here and re-raised as
:class:`~yt_relay.exceptions.ToolInvocationError` — nothing raw escapes
the infrastructure boundary.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

from yt_relay.exceptions import ToolInvocationError

ERROR_MARKER: str = "ERROR"


def summarize_diagnostic(text: str) -> str:
    """Return the line of *text* most worth logging.

    That is the first line carrying yt-dlp's ``ERROR`` marker, else the
    first non-blank line, else an empty string.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    for line in lines:
        if ERROR_MARKER in line:
            return line
    return lines[0] if lines else ""


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class SubprocessToolRunner:
    """Concrete :class:`ToolRunner` backed by :func:`subprocess.run`.

    Arguments are always passed as a list with ``shell=False``; no part
    of a request is ever interpreted by a shell.

    This class satisfies the :class:`~yt_relay.core.protocols.ToolRunner`
    protocol structurally — no explicit inheritance required.
    """

    def invoke(self, args: Sequence[str], timeout: float) -> str:
        """Run *args* and return its stdout.

        Raises
        ------
        ToolInvocationError
            On nonzero exit, timeout expiry, or when the executable
            cannot be started.
        """
        argv = list(args)
        if not argv:
            raise ToolInvocationError("Empty argument vector.")

        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            diagnostic = summarize_diagnostic(_as_text(exc.stderr))
            raise ToolInvocationError(
                f"{argv[0]} timed out after {timeout:g}s",
                timed_out=True,
                diagnostic=diagnostic or f"timed out after {timeout:g}s",
            ) from exc
        except OSError as exc:
            raise ToolInvocationError(
                f"Could not start {argv[0]}: {exc}",
                diagnostic=str(exc),
                hint="Run `yt-relay doctor` to check the toolchain.",
            ) from exc

        if completed.returncode != 0:
            diagnostic = summarize_diagnostic(completed.stderr or "")
            raise ToolInvocationError(
                f"{argv[0]} exited with status {completed.returncode}",
                returncode=completed.returncode,
                diagnostic=diagnostic or f"exit status {completed.returncode}",
            )

        return completed.stdout or ""
