"""yt-relay — HTTP front-end for yt-dlp metadata and MP3 extraction.

Requests are served by trying an ordered catalog of extractor client
strategies until one succeeds.
"""

from yt_relay.version import __version__

__all__: list[str] = ["__version__"]
