"""CLI application entry point and command routing for yt-relay.

This module is the **process error boundary**.  It catches
:class:`~yt_relay.exceptions.YtRelayError`, ``KeyboardInterrupt``, and
any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the web,
  core and infrastructure layers.
* Settings are loaded once here and passed down; nothing below re-reads
  the environment.
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

from yt_relay.cli import exit_codes
from yt_relay.cli.console import console
from yt_relay.exceptions import ConfigurationError, YtRelayError
from yt_relay.version import __version__

if TYPE_CHECKING:
    from yt_relay.config import Settings


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Commands:
    * ``yt-relay serve``   — run the HTTP service
    * ``yt-relay doctor``  — environment diagnostics
    * ``yt-relay --version``
    """
    parser = argparse.ArgumentParser(
        prog="yt-relay",
        description="HTTP front-end for yt-dlp metadata and MP3 extraction.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP service.")
    serve.add_argument("--host", default=None, help="Bind address (overrides YT_RELAY_HOST).")
    serve.add_argument("--port", type=int, default=None, help="Port (overrides PORT).")
    serve.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every attempt at DEBUG level.",
    )

    subparsers.add_parser("doctor", help="Check yt-dlp, ffmpeg, cookies and directories.")
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _load_settings(**overrides: object) -> Settings:
    """Read settings from the environment, mapping validation failures."""
    from pydantic import ValidationError

    from yt_relay.config import Settings

    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid configuration: {exc.error_count()} error(s)",
            hint=str(exc),
        ) from exc


def _handle_serve(args: argparse.Namespace) -> int:
    """Bootstrap the pipeline once and run the threaded server."""
    from yt_relay.logging import configure_logging, logger
    from yt_relay.web.app import create_app

    overrides: dict[str, object] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.verbose:
        overrides["verbose"] = True
    settings = _load_settings(**overrides)

    configure_logging(verbose=settings.verbose)
    app = create_app(settings)

    logger.info("yt-relay running on {}:{}", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port, threaded=True)
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from yt_relay.cli.doctor import run_doctor

    return run_doctor(_load_settings())


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the yt-relay CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    if args.command == "doctor":
        return _handle_doctor()

    return _handle_serve(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except YtRelayError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
