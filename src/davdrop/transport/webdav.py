"""WebDAV transport implementation using httpx."""

import logging
from pathlib import Path
from typing import Iterator
from urllib.parse import quote

import httpx

from davdrop.errors import TransferFailed
from davdrop.transport.base import FileTransport
from davdrop.types import CompressionMode, Credentials

logger = logging.getLogger(__name__)

# Read size for streamed uploads
CHUNK_SIZE = 64 * 1024


class WebDAVClient:
    """Authenticated WebDAV client rooted at a user's file space.

    Remote paths are server-relative ("/artifacts/<id>/name.zip") and are
    resolved against <endpoint>/remote.php/dav/files/<username>.
    """

    def __init__(
        self,
        endpoint: str,
        credentials: Credentials,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.headers = credentials.authorization_header()
        self.dav_root = f"/remote.php/dav/files/{quote(credentials.username)}"
        self._client = httpx.Client(
            base_url=self.endpoint,
            headers=self.headers,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> "WebDAVClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _url(self, path: str) -> str:
        return self.dav_root + quote("/" + path.strip("/"))

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self._client.request(method, self._url(path), **kwargs)
        except httpx.HTTPError as e:
            raise TransferFailed(f"{method} {path} failed: {e}") from e

    def exists(self, path: str) -> bool:
        """Check if a remote file or directory exists."""
        response = self._request("PROPFIND", path, headers={"Depth": "0"})
        if response.status_code in (200, 207):
            return True
        if response.status_code == 404:
            return False
        raise TransferFailed(
            f"PROPFIND {path} returned unexpected status {response.status_code}"
        )

    def mkdir(self, path: str, recursive: bool = True) -> None:
        """Create a remote directory.

        With recursive=True every intermediate segment is created. An
        existing collection (405) counts as success.
        """
        segments = [s for s in path.strip("/").split("/") if s]
        if not segments:
            return

        targets = (
            ["/".join(segments[: i + 1]) for i in range(len(segments))]
            if recursive
            else ["/".join(segments)]
        )
        for target in targets:
            response = self._request("MKCOL", target)
            if response.status_code == 201:
                logger.debug(f"Created remote directory /{target}")
            elif response.status_code != 405:
                raise TransferFailed(
                    f"MKCOL /{target} returned unexpected status {response.status_code}"
                )

    def put(self, path: str, local_path: Path) -> None:
        """Stream a local file to a remote path with a declared Content-Length."""
        try:
            size = local_path.stat().st_size
            with open(local_path, "rb") as f:
                response = self._request(
                    "PUT",
                    path,
                    content=_iter_file(f, size),
                    headers={"Content-Length": str(size)},
                )
        except OSError as e:
            raise TransferFailed(f"Failed to read {local_path}: {e}") from e

        if response.status_code not in (200, 201, 204):
            raise TransferFailed(
                f"PUT {path} returned status {response.status_code}: {response.text[:500]}"
            )
        logger.debug(f"Uploaded {size} bytes to {path}")


def _iter_file(handle, expected_size: int) -> Iterator[bytes]:
    """Yield file chunks, failing if the byte count drifts from expected_size."""
    sent = 0
    while chunk := handle.read(CHUNK_SIZE):
        sent += len(chunk)
        if sent > expected_size:
            raise OSError(f"File grew during upload (expected {expected_size} bytes)")
        yield chunk
    if sent != expected_size:
        raise OSError(f"File shrank during upload ({sent} of {expected_size} bytes)")


def transfer_artifact(
    transport: FileTransport,
    artifact: Path,
    session_id: str,
    artifact_name: str,
    mode: CompressionMode,
    remote_root: str = "/artifacts",
) -> str:
    """Upload an artifact into its per-session container. Returns the remote path."""
    container = f"{remote_root.rstrip('/')}/{session_id}"

    logger.info(f"Checking remote directory {container}")
    if not transport.exists(container):
        logger.debug(f"Creating remote directory {container}")
        transport.mkdir(container, recursive=True)

    remote_path = f"{container}/{artifact_name}"
    if mode == CompressionMode.ZIP:
        remote_path += ".zip"

    logger.info(f"Uploading {artifact.name} to {remote_path}")
    transport.put(remote_path, artifact)
    return remote_path
