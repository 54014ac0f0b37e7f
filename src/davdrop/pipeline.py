"""Upload pipeline: resolve, stage, transfer, share."""

import logging
from pathlib import Path

import httpx

from davdrop.config import DropConfig
from davdrop.paths import resolve_upload_specs, validate_artifact_name
from davdrop.share import ShareResolver
from davdrop.staging import StagingSession
from davdrop.transport.webdav import WebDAVClient, transfer_artifact

logger = logging.getLogger(__name__)


def upload_files(
    root_directory: str | Path,
    artifact_name: str,
    files: list[str | Path],
    config: DropConfig,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Upload files as a single artifact and return its public share URL.

    Raises a DavDropError subclass on failure. The staged archive is
    removed on every exit path; a raw caller-owned file is never removed.
    """
    validate_artifact_name(artifact_name)

    specs = resolve_upload_specs(root_directory, artifact_name, files)
    logger.info(f"Resolved {len(specs)} file(s) for artifact '{artifact_name}'")

    with StagingSession(config.scratch_root, artifact_name, config.copy_workers) as session:
        logger.debug(f"Staging session {session.session_id}")
        artifact = session.build_artifact(specs, config.compression)

        with WebDAVClient(
            config.endpoint,
            config.credentials,
            timeout=config.timeout,
            transport=transport,
        ) as client:
            remote_path = transfer_artifact(
                client,
                artifact,
                session.session_id,
                artifact_name,
                config.compression,
                remote_root=config.remote_root,
            )

    resolver = ShareResolver(
        config.endpoint,
        config.credentials,
        timeout=config.timeout,
        transport=transport,
    )
    url = resolver.share(remote_path)
    logger.info(f"Artifact '{artifact_name}' shared at {url}")
    return url
