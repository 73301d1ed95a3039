"""Acquisition pipeline — the per-request strategy loop.

For one operation on one URL the pipeline walks the catalog in order,
runs yt-dlp once per strategy, and stops at the first attempt whose
output is usable.  A failed attempt never ends the request: its
workspace files are purged, the failure is logged with a one-line
diagnostic, and the next strategy runs.  The fallback strategy is tried
exactly once, after every explicit strategy.  Only when the fallback
also fails does a :class:`~yt_relay.exceptions.ExhaustedStrategiesError`
escape.

Attempts are strictly sequential: each one shares the request's run
token, and an early success must skip the remaining tool invocations.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from yt_relay.core.catalog import StrategyCatalog
from yt_relay.core.command import build_arguments
from yt_relay.core.metadata_parser import parse_metadata
from yt_relay.core.models import (
    AcquisitionResult,
    Attempt,
    AudioArtifact,
    Operation,
    Strategy,
    Toolchain,
    VideoMetadata,
)
from yt_relay.core.protocols import ArtifactStore, ToolRunner
from yt_relay.exceptions import (
    ArtifactMissingError,
    AttemptError,
    ExhaustedStrategiesError,
    InvalidRequestError,
    ToolInvocationError,
    YtRelayError,
    append_ytdlp_upgrade_suggestion,
)
from yt_relay.logging import logger

MAX_DIAGNOSTIC_LENGTH: int = 200

_EXHAUSTED_MESSAGES: dict[Operation, str] = {
    Operation.METADATA: "All clients failed to fetch video info",
    Operation.EXTRACTION: "All clients failed to convert video",
}


def validate_url(url: str | None) -> str:
    """Return the stripped *url* or raise :class:`InvalidRequestError`.

    Any non-blank value is handed to yt-dlp, which also accepts
    schemeless URLs and bare video IDs.
    """
    stripped = (url or "").strip()
    if not stripped:
        raise InvalidRequestError("Missing url param")
    return stripped


def truncate_diagnostic(text: str, limit: int = MAX_DIAGNOSTIC_LENGTH) -> str:
    """Collapse *text* to one bounded line for logging."""
    line = " ".join(text.split())
    if len(line) <= limit:
        return line
    return line[: limit - 3] + "..."


class AcquisitionPipeline:
    """Drive yt-dlp through the strategy catalog until one attempt succeeds.

    Parameters
    ----------
    runner:
        Any object satisfying the :class:`ToolRunner` protocol.
    workspace:
        Any object satisfying the :class:`ArtifactStore` protocol.
    catalog:
        Ordered strategies per operation, plus the fallback.
    toolchain:
        Resolved tool locations, credentials and timeouts.
    """

    def __init__(
        self,
        runner: ToolRunner,
        workspace: ArtifactStore,
        catalog: StrategyCatalog,
        toolchain: Toolchain,
    ) -> None:
        self._runner: ToolRunner = runner
        self._workspace: ArtifactStore = workspace
        self._catalog: StrategyCatalog = catalog
        self._toolchain: Toolchain = toolchain

    @property
    def workspace(self) -> ArtifactStore:
        return self._workspace

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch_metadata(self, url: str | None) -> AcquisitionResult:
        """Return normalized metadata for *url*.

        Raises
        ------
        InvalidRequestError
            If *url* is missing or blank.
        ExhaustedStrategiesError
            If every strategy, including the fallback, failed.
        """
        return self.run(Operation.METADATA, url)

    def extract_audio(self, url: str | None) -> AcquisitionResult:
        """Download and transcode *url*, returning the finished artifact.

        The caller owns the returned file and must purge its run token
        once the file has been delivered.

        Raises
        ------
        InvalidRequestError
            If *url* is missing or blank.
        ExhaustedStrategiesError
            If every strategy, including the fallback, failed.  No
            workspace entries of the run remain in that case.
        """
        return self.run(Operation.EXTRACTION, url)

    def run(self, operation: Operation, url: str | None) -> AcquisitionResult:
        """Try each strategy for *operation* in catalog order."""
        target = validate_url(url)
        token: str | None = None
        if operation is Operation.EXTRACTION:
            token = self._workspace.new_run_token()

        attempts: list[Attempt] = []
        for strategy in self._catalog.sequence_for(operation):
            try:
                payload = self._attempt(operation, strategy, target, token)
            except AttemptError as exc:
                attempts.append(self._record_failure(operation, strategy, target, token, exc))
                continue

            logger.info(
                "[{}] client {} succeeded after {} failed attempt(s)",
                operation.value,
                strategy.name,
                len(attempts),
            )
            attempts.append(
                Attempt(
                    strategy=strategy.name,
                    operation=operation,
                    url=target,
                    succeeded=True,
                ),
            )
            return AcquisitionResult(
                payload=payload,
                strategy=strategy.name,
                attempts=tuple(attempts),
            )

        logger.error(
            "[{}] all {} strategies failed for {}",
            operation.value,
            len(attempts),
            target,
        )
        raise ExhaustedStrategiesError(
            _EXHAUSTED_MESSAGES[operation],
            attempts=attempts,
            hint=append_ytdlp_upgrade_suggestion(
                "The video may be private, restricted, or temporarily blocked.",
            ),
        )

    # ------------------------------------------------------------------
    # Single attempt
    # ------------------------------------------------------------------

    def _attempt(
        self,
        operation: Operation,
        strategy: Strategy,
        url: str,
        token: str | None,
    ) -> VideoMetadata | AudioArtifact:
        logger.debug("[{}] trying client {}", operation.value, strategy.name)
        if token is None:
            return self._fetch_once(strategy, url)
        return self._extract_once(strategy, url, token)

    def _fetch_once(self, strategy: Strategy, url: str) -> VideoMetadata:
        operation = Operation.METADATA
        args = build_arguments(operation, self._toolchain, strategy, url)
        output = self._invoke(args, self._toolchain.timeout_for(operation))
        return parse_metadata(output)

    def _extract_once(self, strategy: Strategy, url: str, token: str) -> AudioArtifact:
        operation = Operation.EXTRACTION
        args = build_arguments(
            operation,
            self._toolchain,
            strategy,
            url,
            output_pattern=self._workspace.output_pattern(token),
        )
        self._invoke(args, self._toolchain.timeout_for(operation))
        suffix = f".{self._toolchain.audio_format}"
        path = self._workspace.find_by_prefix(token, suffix)
        if path is None:
            raise ArtifactMissingError(
                f"{self._toolchain.audio_format.upper()} not found after conversion",
            )
        return AudioArtifact(
            path=path,
            run_token=token,
            download_name=self._workspace.display_name(path),
        )

    def _invoke(self, args: Sequence[str], timeout: float) -> str:
        """Call the runner and ensure only our exceptions escape."""
        try:
            return self._runner.invoke(args, timeout)
        except YtRelayError:
            raise
        except Exception as exc:
            raise ToolInvocationError(
                f"Unexpected runner error: {exc}",
                diagnostic=str(exc),
            ) from exc

    def _record_failure(
        self,
        operation: Operation,
        strategy: Strategy,
        url: str,
        token: str | None,
        exc: AttemptError,
    ) -> Attempt:
        diagnostic = str(exc)
        if isinstance(exc, ToolInvocationError) and exc.diagnostic:
            diagnostic = exc.diagnostic
        diagnostic = truncate_diagnostic(diagnostic)

        artifacts: tuple[Path, ...] = ()
        if token is not None:
            artifacts = tuple(self._workspace.entries(token))
            self._workspace.purge(token)

        logger.warning(
            "[{}] client {} failed: {}",
            operation.value,
            strategy.name,
            diagnostic,
        )
        return Attempt(
            strategy=strategy.name,
            operation=operation,
            url=url,
            succeeded=False,
            diagnostic=diagnostic,
            artifacts=artifacts,
        )
