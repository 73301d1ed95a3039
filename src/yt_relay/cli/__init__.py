"""CLI layer — argument parsing, server startup and the process error boundary.

This package is an outermost layer.  It may import from ``core``,
``infra`` and ``web``, but no other layer may import from ``cli``.
"""
