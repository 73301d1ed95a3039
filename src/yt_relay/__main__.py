"""Allow ``python -m yt_relay`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m yt_relay`` behaves identically to the ``yt-relay``
console script.
"""

from __future__ import annotations

from yt_relay.cli.app import cli

if __name__ == "__main__":
    cli()
