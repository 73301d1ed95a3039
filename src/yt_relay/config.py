"""Process configuration for yt-relay.

Settings are read once at startup from ``YT_RELAY_``-prefixed
environment variables.  Two unprefixed names from the original
deployment are also honoured: ``PORT`` and ``YT_COOKIE``.

Example::

    YT_RELAY_DOWNLOADS_DIR=/srv/yt/downloads
    YT_RELAY_CLIENTS=android,ios,mweb
    YT_COOKIE="$(cat cookies.txt)"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from yt_relay.core.catalog import DEFAULT_CLIENTS, DEFAULT_PLAYER_SKIP


class Settings(BaseSettings):
    """Runtime configuration for the HTTP service."""

    model_config = SettingsConfigDict(
        env_prefix="YT_RELAY_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        validate_default=True,
    )

    host: str = Field("0.0.0.0", description="Interface the server binds to")
    port: int = Field(
        3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("YT_RELAY_PORT", "PORT", "port"),
        description="TCP port the server listens on",
    )
    downloads_dir: Path = Field(
        Path("downloads"), description="Working directory for audio artifacts"
    )
    cookie: str | None = Field(
        None,
        validation_alias=AliasChoices("YT_RELAY_COOKIE", "YT_COOKIE", "cookie"),
        description="Netscape cookie file contents written to cookie_file at startup",
    )
    cookie_file: Path = Field(
        Path("cookies.txt"), description="Cookie file passed to yt-dlp when non-empty"
    )
    info_timeout: float = Field(30.0, gt=0, description="Seconds allowed per /info attempt")
    extract_timeout: float = Field(
        120.0, gt=0, description="Seconds allowed per /mp3 attempt (download + transcode)"
    )
    clients: str = Field(
        ",".join(DEFAULT_CLIENTS),
        description="Comma-separated player clients, tried in order",
    )
    player_skip: str | None = Field(
        DEFAULT_PLAYER_SKIP, description="player_skip value added to every client strategy"
    )
    audio_format: str = Field("mp3", description="Target audio codec for extraction")
    audio_quality: str = Field("192K", description="Target audio bitrate for extraction")
    ytdlp_path: Path | None = Field(None, description="Explicit yt-dlp executable")
    ffmpeg_path: Path | None = Field(None, description="Explicit ffmpeg executable")
    verbose: bool = Field(False, description="Enable DEBUG logging")

    @field_validator("downloads_dir", "cookie_file", "ytdlp_path", "ffmpeg_path", mode="before")
    @classmethod
    def expand_paths(cls, v: Any, info: ValidationInfo) -> Any:
        """Expand user home and make absolute.

        A blank value means "use the default": ``None`` for the optional
        binary overrides, the declared default path otherwise.
        """
        if v is None or (isinstance(v, str) and not v.strip()):
            v = cls.model_fields[info.field_name].default
            if v is None:
                return None
        if isinstance(v, (str, Path)):
            return Path(v).expanduser().resolve()
        return v

    @field_validator("clients")
    @classmethod
    def validate_clients(cls, v: str) -> str:
        """Require at least one client name."""
        if not [name for name in v.split(",") if name.strip()]:
            raise ValueError("clients must name at least one player client")
        return v

    @field_validator("player_skip", mode="before")
    @classmethod
    def blank_player_skip(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def client_names(self) -> tuple[str, ...]:
        """Return the configured clients in declared order."""
        return tuple(name.strip() for name in self.clients.split(",") if name.strip())
