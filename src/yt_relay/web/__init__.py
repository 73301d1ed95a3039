"""HTTP layer — Flask routes, response rendering and the request error boundary.

This package is an outermost layer.  It may import from ``core`` and
``infra``; neither of those may import from ``web``.
"""

from yt_relay.web.app import create_app

__all__: list[str] = ["create_app"]
