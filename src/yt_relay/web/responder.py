"""Result responder — turns pipeline payloads into HTTP responses.

Audio is streamed through :class:`ArtifactStream`, whose ``close()``
purges the run token.  WSGI servers call ``close()`` on the response
iterable both after a complete transfer and when the client goes away,
so the file is removed on every exit path, exactly once.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from pathlib import Path
from typing import IO

from flask import Response, jsonify

from yt_relay.core.models import AudioArtifact, VideoMetadata
from yt_relay.core.protocols import ArtifactStore
from yt_relay.exceptions import ArtifactMissingError
from yt_relay.logging import logger

CHUNK_SIZE: int = 64 * 1024

AUDIO_MIMETYPES: dict[str, str] = {
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".opus": "audio/ogg",
    ".ogg": "audio/ogg",
    ".wav": "audio/wav",
    ".flac": "audio/flac",
}


class ArtifactStream:
    """Iterable over a workspace file that purges its run token on close."""

    def __init__(
        self,
        path: Path,
        token: str,
        workspace: ArtifactStore,
        *,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        self._path: Path = path
        self._token: str = token
        self._workspace: ArtifactStore = workspace
        self._chunk_size: int = chunk_size
        self._handle: IO[bytes] | None = None
        self._lock = threading.Lock()
        self._closed: bool = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[bytes]:
        if self._closed:
            return
        self._handle = self._path.open("rb")
        while True:
            chunk = self._handle.read(self._chunk_size)
            if not chunk:
                break
            yield chunk

    def close(self) -> None:
        """Release the file handle and delete the artifact.  Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._handle is not None:
            self._handle.close()
        self._workspace.purge(self._token)
        logger.debug("[mp3] cleaned up {}", self._token)


def metadata_response(metadata: VideoMetadata) -> Response:
    """Serialize normalized metadata as JSON."""
    return jsonify(metadata.to_dict())


def artifact_response(artifact: AudioArtifact, workspace: ArtifactStore) -> Response:
    """Stream *artifact* as a download and delete it once the transfer ends."""
    try:
        size = artifact.path.stat().st_size
    except OSError as exc:
        workspace.purge(artifact.run_token)
        raise ArtifactMissingError(f"Artifact vanished before delivery: {artifact.path.name}") from exc

    stream = ArtifactStream(artifact.path, artifact.run_token, workspace)
    response = Response(
        stream,
        mimetype=AUDIO_MIMETYPES.get(artifact.path.suffix.lower(), "application/octet-stream"),
    )
    response.headers["Content-Length"] = str(size)
    response.headers["Content-Disposition"] = (
        f'attachment; filename="{artifact.download_name}"'
    )
    return response
