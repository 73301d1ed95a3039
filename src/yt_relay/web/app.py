"""Flask application factory and routes for yt-relay.

This module is the **request error boundary**.  Typed
:class:`~yt_relay.exceptions.YtRelayError` subclasses are mapped to
JSON error payloads here; raw tool diagnostics never reach the caller.

Routes
------
* ``GET /``     — liveness/status payload
* ``GET /info`` — normalized metadata for ``?url=``
* ``GET /mp3``  — MP3 download for ``?url=``, deleted after transfer
"""

from __future__ import annotations

from flask import Flask, Response, current_app, jsonify, request

from yt_relay.config import Settings
from yt_relay.core.models import AudioArtifact, VideoMetadata
from yt_relay.core.pipeline import AcquisitionPipeline, validate_url
from yt_relay.exceptions import ExhaustedStrategiesError, InvalidRequestError, YtRelayError
from yt_relay.logging import logger
from yt_relay.version import __version__
from yt_relay.web.responder import artifact_response, metadata_response

EXTENSION_KEY: str = "yt_relay"


def get_pipeline() -> AcquisitionPipeline:
    """Return the pipeline bound to the current application."""
    return current_app.extensions[EXTENSION_KEY]


def create_app(
    settings: Settings | None = None,
    *,
    pipeline: AcquisitionPipeline | None = None,
) -> Flask:
    """Build the Flask application.

    Parameters
    ----------
    settings:
        Process configuration.  Read from the environment when omitted.
    pipeline:
        Pre-built pipeline, typically a test double.  When omitted the
        production pipeline is bootstrapped from *settings*.
    """
    if pipeline is None:
        from yt_relay.infra.bootstrap import build_pipeline

        pipeline = build_pipeline(settings or Settings())

    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = pipeline

    _register_routes(app)
    _register_error_handlers(app)
    return app


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

def _register_routes(app: Flask) -> None:
    @app.get("/")
    def status() -> Response:
        return jsonify({"service": "yt-relay", "status": "running", "version": __version__})

    @app.get("/info")
    def info() -> Response:
        url = validate_url(request.args.get("url"))
        result = get_pipeline().fetch_metadata(url)
        payload = result.payload
        if not isinstance(payload, VideoMetadata):
            raise YtRelayError(f"Unexpected /info payload: {type(payload).__name__}")
        logger.info("[info] client {}: {}", result.strategy, payload.title)
        return metadata_response(payload)

    @app.get("/mp3")
    def mp3() -> Response:
        url = validate_url(request.args.get("url"))
        pipeline = get_pipeline()
        result = pipeline.extract_audio(url)
        payload = result.payload
        if not isinstance(payload, AudioArtifact):
            raise YtRelayError(f"Unexpected /mp3 payload: {type(payload).__name__}")
        logger.info("[mp3] client {}: {}", result.strategy, payload.path.name)
        return artifact_response(payload, pipeline.workspace)


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(InvalidRequestError)
    def invalid_request(exc: InvalidRequestError) -> tuple[Response, int]:
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(ExhaustedStrategiesError)
    def exhausted(exc: ExhaustedStrategiesError) -> tuple[Response, int]:
        return jsonify({"error": str(exc)}), 500

    @app.errorhandler(YtRelayError)
    def relay_error(exc: YtRelayError) -> tuple[Response, int]:
        logger.error("Request failed: {}", exc)
        return jsonify({"error": "Request failed. Please try again later."}), 500
