"""Core type definitions for davdrop."""

import base64
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr

# OCS share type for a public link
PUBLIC_LINK_SHARE = 3
# OCS permission bit for read-only
READ_PERMISSION = 1


class CompressionMode(str, Enum):
    """How the artifact is packaged before transfer."""

    ZIP = "zip"
    NONE = "none"


class IfNoFilesFound(str, Enum):
    """What the CLI does when a search matches nothing."""

    WARN = "warn"
    ERROR = "error"
    IGNORE = "ignore"


class UploadSpec(BaseModel):
    """A validated local file and its path inside the artifact.

    upload_path always starts with the artifact name:
        my-artifact/dir/file.txt
    """

    model_config = ConfigDict(frozen=True)

    absolute_path: Path
    upload_path: str


class Credentials(BaseModel):
    """Username and password for the remote service."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: SecretStr

    def authorization_header(self) -> dict[str, str]:
        """Build the fixed Basic authorization header."""
        raw = f"{self.username}:{self.password.get_secret_value()}"
        token = base64.b64encode(raw.encode()).decode("ascii")
        return {"Authorization": f"Basic {token}"}


class ShareRequest(BaseModel):
    """Body of a public share request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str
    share_type: int = Field(default=PUBLIC_LINK_SHARE, alias="shareType")
    # The share API expects the string form
    public_upload: str = Field(default="false", alias="publicUpload")
    permissions: int = READ_PERMISSION

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
