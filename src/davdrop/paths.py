"""Validation of local files and their paths inside an artifact."""

import logging
from pathlib import Path

from davdrop.errors import InvalidArtifactName, InvalidRoot, MissingFile, PathEscapesRoot
from davdrop.types import UploadSpec

logger = logging.getLogger(__name__)

# Characters the server refuses in file names
INVALID_ARTIFACT_NAME_CHARS = ['"', ":", "<", ">", "|", "*", "?", "\r", "\n", "/", "\\"]


def validate_artifact_name(name: str) -> None:
    """Reject artifact names the remote service cannot store."""
    if not name or not name.strip():
        raise InvalidArtifactName("Artifact name cannot be empty")
    if name in (".", ".."):
        raise InvalidArtifactName(f"Artifact name is not valid: {name!r}")

    for char in INVALID_ARTIFACT_NAME_CHARS:
        if char in name:
            raise InvalidArtifactName(
                f"Artifact name is not valid: {name!r}. Contains character {char!r}"
            )


def resolve_upload_specs(
    root_directory: str | Path,
    artifact_name: str,
    files: list[str | Path],
) -> list[UploadSpec]:
    """
    Map candidate files to their paths inside the artifact.

    Example:
        root_directory: /home/user/files/plz-upload
        files: [/home/user/files/plz-upload/file1.txt,
                /home/user/files/plz-upload/dir/file3.txt]
        artifact_name: my-artifact

        -> [(/home/user/files/plz-upload/file1.txt, my-artifact/file1.txt),
            (/home/user/files/plz-upload/dir/file3.txt, my-artifact/dir/file3.txt)]

    Directories are skipped; the caller is expected to have expanded them.
    Output order matches input order.
    """
    root_path = Path(root_directory)
    if not root_path.exists():
        raise InvalidRoot(f"Root directory {root_directory} does not exist")
    if not root_path.is_dir():
        raise InvalidRoot(f"Root directory {root_directory} is not a valid directory")

    # Resolve so relative paths and symlinks compare correctly
    root = root_path.resolve()
    specs: list[UploadSpec] = []

    for file in files:
        file_path = Path(file)
        if not file_path.exists():
            raise MissingFile(f"File {file} does not exist")

        if file_path.is_dir():
            logger.debug(f"Skipping {file} because it is a directory")
            continue

        resolved = file_path.resolve()
        # Segment-wise check: /root2/f.txt is not inside /root
        if root not in resolved.parents:
            raise PathEscapesRoot(
                f"The root directory {root} is not a parent directory of the file {resolved}"
            )

        relative = resolved.relative_to(root)
        specs.append(UploadSpec(
            absolute_path=resolved,
            upload_path=f"{artifact_name}/{relative.as_posix()}",
        ))

    return specs
