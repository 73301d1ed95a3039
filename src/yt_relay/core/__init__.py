"""Core layer — strategy catalog, argument construction and the acquisition pipeline.

Rules
-----
* No ``print()`` calls.
* No subprocess or filesystem access; those go through the protocols.
* No imports from ``cli``, ``web`` or ``infra``.
"""

from yt_relay.core.catalog import StrategyCatalog, default_catalog
from yt_relay.core.models import (
    AcquisitionResult,
    Attempt,
    AudioArtifact,
    Operation,
    Strategy,
    Toolchain,
    VideoMetadata,
)
from yt_relay.core.pipeline import AcquisitionPipeline
from yt_relay.core.protocols import ArtifactStore, ToolRunner

__all__: list[str] = [
    "AcquisitionPipeline",
    "AcquisitionResult",
    "ArtifactStore",
    "Attempt",
    "AudioArtifact",
    "Operation",
    "Strategy",
    "StrategyCatalog",
    "ToolRunner",
    "Toolchain",
    "VideoMetadata",
    "default_catalog",
]
