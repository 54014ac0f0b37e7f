"""Remote file transport module."""

from davdrop.transport.base import FileTransport
from davdrop.transport.webdav import WebDAVClient, transfer_artifact

__all__ = ["FileTransport", "WebDAVClient", "transfer_artifact"]
