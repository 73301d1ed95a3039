"""Shared pytest fixtures and configuration for the yt-relay test suite.

Guidelines
----------
* No internet access in any test.
* yt-dlp is never executed: the tool runner is replaced by
  :class:`ScriptedRunner` or ``subprocess.run`` is patched.
* Workspaces live under ``tmp_path``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from yt_relay.core.catalog import StrategyCatalog, client_strategies
from yt_relay.core.models import Operation, Toolchain
from yt_relay.core.pipeline import AcquisitionPipeline
from yt_relay.infra.workspace import ArtifactWorkspace

Step = Callable[[list[str]], str]
"""One scripted tool run: receives the argv, returns stdout or raises."""


class ScriptedRunner:
    """Fake :class:`ToolRunner` that replays one step per invocation."""

    def __init__(self, steps: Sequence[Step]) -> None:
        self._steps: list[Step] = list(steps)
        self.calls: list[list[str]] = []
        self.timeouts: list[float] = []

    def invoke(self, args: Sequence[str], timeout: float) -> str:
        argv = list(args)
        self.calls.append(argv)
        self.timeouts.append(timeout)
        if not self._steps:
            raise AssertionError(f"unexpected tool call: {argv}")
        return self._steps.pop(0)(argv)


def output_path(argv: list[str], ext: str) -> Path:
    """Resolve the ``-o`` template in *argv* for extension *ext*."""
    template = argv[argv.index("-o") + 1]
    return Path(template.replace("%(ext)s", ext))


def client_of(argv: list[str]) -> str | None:
    """Return the forced player client in *argv*, or ``None``."""
    if "--extractor-args" not in argv:
        return None
    value = argv[argv.index("--extractor-args") + 1]
    for part in value.split(":", 1)[1].split(";"):
        key, _, val = part.partition("=")
        if key == "player_client":
            return val
    return None


@pytest.fixture()
def toolchain() -> Toolchain:
    return Toolchain(
        ytdlp_command=("/usr/bin/yt-dlp",),
        ffmpeg_location=Path("/usr/bin/ffmpeg"),
        cookie_file=None,
        info_timeout=30.0,
        extract_timeout=120.0,
    )


@pytest.fixture()
def catalog() -> StrategyCatalog:
    strategies = client_strategies(("android", "ios", "mweb"))
    return StrategyCatalog(
        {
            Operation.METADATA: strategies,
            Operation.EXTRACTION: strategies,
        },
    )


@pytest.fixture()
def workspace(tmp_path: Path) -> ArtifactWorkspace:
    return ArtifactWorkspace(tmp_path / "downloads")


@pytest.fixture()
def make_pipeline(
    workspace: ArtifactWorkspace,
    catalog: StrategyCatalog,
    toolchain: Toolchain,
) -> Callable[[Sequence[Step]], tuple[AcquisitionPipeline, ScriptedRunner]]:
    """Return a factory building a pipeline around scripted tool runs."""

    def _build(steps: Sequence[Step]) -> tuple[AcquisitionPipeline, ScriptedRunner]:
        runner = ScriptedRunner(steps)
        return AcquisitionPipeline(runner, workspace, catalog, toolchain), runner

    return _build
