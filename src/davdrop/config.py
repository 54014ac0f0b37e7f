"""Configuration models for davdrop."""

import tempfile
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from davdrop.types import CompressionMode, Credentials


class ServerConfig(BaseModel):
    """Remote server configuration."""

    endpoint: str
    timeout: float = 60.0
    remote_root: str = "/artifacts"  # Per-session containers are created under this

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL, got: {v!r}")
        return v

    @field_validator("remote_root")
    @classmethod
    def validate_remote_root(cls, v: str) -> str:
        v = "/" + v.strip("/")
        if v == "/":
            raise ValueError("remote_root cannot be the server root")
        return v


class UploadConfig(BaseModel):
    """Local packaging configuration."""

    compression: CompressionMode = CompressionMode.ZIP
    scratch_root: str | None = None  # Defaults to the system temp directory
    copy_workers: int = 8

    @field_validator("copy_workers")
    @classmethod
    def validate_copy_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("copy_workers must be at least 1")
        return v


class DavDropConfig(BaseModel):
    """Main davdrop configuration file."""

    server: ServerConfig
    upload: UploadConfig = UploadConfig()


class DropConfig(BaseModel):
    """Settings for a single pipeline invocation.

    Built once per upload and passed to every stage. Credentials are only
    ever supplied here, never read from the configuration file.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str
    credentials: Credentials
    compression: CompressionMode = CompressionMode.ZIP
    scratch_root: Path
    remote_root: str = "/artifacts"
    timeout: float = 60.0
    copy_workers: int = 8

    @classmethod
    def from_config(
        cls,
        config: DavDropConfig,
        credentials: Credentials,
        compression: CompressionMode | None = None,
    ) -> "DropConfig":
        scratch_root = config.upload.scratch_root or tempfile.gettempdir()
        return cls(
            endpoint=config.server.endpoint,
            credentials=credentials,
            compression=compression or config.upload.compression,
            scratch_root=Path(scratch_root).expanduser(),
            remote_root=config.server.remote_root,
            timeout=config.server.timeout,
            copy_workers=config.upload.copy_workers,
        )


def load_config(path: Path) -> DavDropConfig:
    """Load configuration from YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return DavDropConfig.model_validate(data or {})


def get_config_template() -> str:
    """Get the default configuration template."""
    return """# davdrop configuration
#
# Credentials are not stored here. Pass --username/--password or set
# DAVDROP_USERNAME and DAVDROP_PASSWORD.

server:
  endpoint: https://cloud.example.com  # Nextcloud base URL
  timeout: 60  # Seconds per request
  remote_root: /artifacts  # Uploads land in <remote_root>/<session-id>/

upload:
  compression: zip  # 'zip' (archive all files) or 'none' (single raw file)
  # scratch_root: /tmp  # Where artifacts are staged before upload
  copy_workers: 8
"""
