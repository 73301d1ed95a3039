"""Shared Rich console for CLI output.

Everything the CLI renders goes to stderr so stdout stays free for
machine-readable output.
"""

from __future__ import annotations

from rich.console import Console

console = Console(stderr=True)
