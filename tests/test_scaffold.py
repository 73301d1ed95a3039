"""Smoke tests — verify package wiring.

These tests prove that:
* The CLI entry point is importable and callable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from yt_relay import __version__
from yt_relay.cli import exit_codes
from yt_relay.cli.app import cli, main
from yt_relay.exceptions import (
    ArtifactMissingError,
    AttemptError,
    BinaryNotFoundError,
    ConfigurationError,
    EnvironmentError,
    ExhaustedStrategiesError,
    InvalidRequestError,
    MetadataParseError,
    ToolInvocationError,
    YtRelayError,
    append_ytdlp_upgrade_suggestion,
)


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            InvalidRequestError,
            AttemptError,
            ToolInvocationError,
            MetadataParseError,
            ArtifactMissingError,
            ExhaustedStrategiesError,
            ConfigurationError,
            EnvironmentError,
            BinaryNotFoundError,
        ],
    )
    def test_all_exceptions_inherit_from_base(self, exc_class: type[YtRelayError]) -> None:
        assert issubclass(exc_class, YtRelayError)

    @pytest.mark.parametrize(
        "exc_class", [ToolInvocationError, MetadataParseError, ArtifactMissingError],
    )
    def test_attempt_failures(self, exc_class: type[YtRelayError]) -> None:
        assert issubclass(exc_class, AttemptError)

    def test_exhausted_is_not_an_attempt_failure(self) -> None:
        assert not issubclass(ExhaustedStrategiesError, AttemptError)

    def test_hint_is_stored(self) -> None:
        err = YtRelayError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_tool_invocation_fields(self) -> None:
        err = ToolInvocationError("t", returncode=1, timed_out=True, diagnostic="ERROR: x")
        assert err.returncode == 1
        assert err.timed_out
        assert err.diagnostic == "ERROR: x"

    def test_exhausted_attempts_are_a_tuple(self) -> None:
        assert ExhaustedStrategiesError("all failed", attempts=[]).attempts == ()

    def test_upgrade_suggestion_appended_once(self) -> None:
        hint = append_ytdlp_upgrade_suggestion("Try later.")
        assert hint.startswith("Try later.")
        assert "pip install --upgrade yt-dlp" in hint
        assert append_ytdlp_upgrade_suggestion(hint) == hint


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_values(self) -> None:
        assert exit_codes.SUCCESS == 0
        assert exit_codes.GENERAL_ERROR == 1
        assert exit_codes.UNEXPECTED_ERROR == 2
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# CLI routing
# ---------------------------------------------------------------------------

class TestCLIRouting:
    def test_no_args_returns_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == exit_codes.SUCCESS
        assert "serve" in capsys.readouterr().out

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    @patch("yt_relay.web.app.create_app")
    def test_serve_passes_overrides(self, mock_create: MagicMock) -> None:
        code = main(["serve", "--host", "127.0.0.1", "--port", "5055"])

        assert code == exit_codes.SUCCESS
        settings = mock_create.call_args.args[0]
        assert settings.host == "127.0.0.1"
        assert settings.port == 5055
        mock_create.return_value.run.assert_called_once_with(
            host="127.0.0.1", port=5055, threaded=True,
        )

    def test_invalid_port_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            main(["serve", "--port", "0"])


class TestErrorBoundary:
    def test_known_error_exits_general(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from yt_relay.cli import app as app_module

        def _raise(argv: object = None) -> int:
            raise BinaryNotFoundError("yt-dlp missing", hint="pip install yt-dlp")

        monkeypatch.setattr(app_module, "main", _raise)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.GENERAL_ERROR

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from yt_relay.cli import app as app_module

        def _raise(argv: object = None) -> int:
            raise KeyboardInterrupt

        monkeypatch.setattr(app_module, "main", _raise)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from yt_relay.cli import app as app_module

        def _raise(argv: object = None) -> int:
            raise RuntimeError("bug")

        monkeypatch.setattr(app_module, "main", _raise)
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.UNEXPECTED_ERROR
