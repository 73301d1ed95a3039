"""Custom exception hierarchy for yt-relay.

All exceptions that cross layer boundaries must inherit from
:class:`YtRelayError`.  Raw subprocess and OS errors must never
propagate beyond the infrastructure layer — they are caught there and
re-raised as a typed subclass defined here.

Hierarchy
---------
YtRelayError
├── InvalidRequestError
├── AttemptError
│   ├── ToolInvocationError
│   ├── MetadataParseError
│   └── ArtifactMissingError
├── ExhaustedStrategiesError
├── ConfigurationError
└── EnvironmentError
    └── BinaryNotFoundError
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from yt_relay.core.models import Attempt


class YtRelayError(Exception):
    """Base exception for all yt-relay errors.

    Every caller-visible error condition maps to a subclass of this
    exception so that the HTTP and CLI error boundaries can render a
    clean message without leaking tool diagnostics or stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Request validation ----------------------------------------------------

class InvalidRequestError(YtRelayError):
    """Raised when a required request parameter is missing or malformed."""


# --- Per-attempt failures --------------------------------------------------

class AttemptError(YtRelayError):
    """Base for failures that end a single strategy attempt.

    The pipeline recovers from these locally by advancing to the next
    strategy; they never reach the caller directly.
    """


class ToolInvocationError(AttemptError):
    """Raised when the external tool exits nonzero, times out, or cannot spawn."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        timed_out: bool = False,
        diagnostic: str = "",
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.returncode: int | None = returncode
        self.timed_out: bool = timed_out
        self.diagnostic: str = diagnostic


class MetadataParseError(AttemptError):
    """Raised when tool output holds no line that parses as a JSON object."""


class ArtifactMissingError(AttemptError):
    """Raised when extraction reported success but no output file exists."""


# --- Total failure ---------------------------------------------------------

class ExhaustedStrategiesError(YtRelayError):
    """Raised when every strategy, including the fallback, has failed."""

    def __init__(
        self,
        message: str,
        *,
        attempts: Sequence[Attempt] = (),
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.attempts: tuple[Attempt, ...] = tuple(attempts)


class ConfigurationError(YtRelayError):
    """Raised when settings from the environment fail validation."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(YtRelayError):
    """Raised when a required runtime dependency is not available."""


class BinaryNotFoundError(EnvironmentError):
    """Raised when a required external binary cannot be located."""


def append_ytdlp_upgrade_suggestion(hint: str) -> str:
    """Append yt-dlp upgrade guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = "Also try updating yt-dlp:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            "    pip install --upgrade yt-dlp",
        )
    )
