"""Public share link creation."""

import logging
import re

import httpx

from davdrop.errors import ShareParseFailed, TransferFailed
from davdrop.types import Credentials, ShareRequest

logger = logging.getLogger(__name__)

SHARE_API_PATH = "/ocs/v2.php/apps/files_sharing/api/v1/shares"

# Only the first <url> element is used; the response format is not parsed further
URL_PATTERN = re.compile(r"<url>(.*?)</url>", re.DOTALL)


def extract_share_url(body: str) -> str:
    """Extract the share URL from an OCS response body."""
    match = URL_PATTERN.search(body)
    if match is None:
        raise ShareParseFailed("No <url> found in share response", body)

    url = match.group(1).strip()
    if not url:
        raise ShareParseFailed("Empty <url> in share response", body)
    return url


class ShareResolver:
    """Requests public read-only links for uploaded files."""

    def __init__(
        self,
        endpoint: str,
        credentials: Credentials,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = endpoint.rstrip("/") + SHARE_API_PATH
        self.headers = {
            **credentials.authorization_header(),
            "OCS-APIRequest": "true",
        }
        self.timeout = timeout
        self.transport = transport

    def share(self, remote_path: str) -> str:
        """Create a public link for remote_path and return its URL."""
        request = ShareRequest(path=remote_path)
        logger.info(f"Requesting public share for {remote_path}")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.url,
                    json=request.to_payload(),
                    headers=self.headers,
                )
                # Success or failure is reported in the body, not only the status
                body = response.text
        except httpx.HTTPError as e:
            raise TransferFailed(f"Share request for {remote_path} failed: {e}") from e

        logger.debug(f"Share response ({response.status_code}): {body}")
        return extract_share_url(body)
