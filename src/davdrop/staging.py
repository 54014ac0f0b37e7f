"""Staging of upload specs into a single transferable artifact."""

import logging
import shutil
import uuid
import zipfile
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path

from davdrop.errors import ArchiveFailed, IncompatibleMode
from davdrop.types import CompressionMode, UploadSpec

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"


class StagingSession:
    """Invocation-scoped scratch area for assembling an artifact.

    Layout:
        <scratch_root>/<session_id>/artifact-<artifact_name>/
            <artifact_name>/...        copied files
            <artifact_name>.zip        compressed artifact

    Use as a context manager; everything under <scratch_root>/<session_id>
    is removed on exit, whether or not the upload succeeded. Files outside
    the session directory are never touched.
    """

    def __init__(self, scratch_root: Path, artifact_name: str, copy_workers: int = 8):
        self.session_id = str(uuid.uuid4())
        self.artifact_name = artifact_name
        self.copy_workers = copy_workers
        self.session_dir = Path(scratch_root) / self.session_id
        self.staging_root = self.session_dir / f"artifact-{artifact_name}"
        self._cleaned = False

    def __enter__(self) -> "StagingSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    @property
    def artifact_dir(self) -> Path:
        return self.staging_root / self.artifact_name

    @property
    def archive_path(self) -> Path:
        return self.staging_root / f"{self.artifact_name}{ARCHIVE_SUFFIX}"

    def build_artifact(self, specs: list[UploadSpec], mode: CompressionMode) -> Path:
        """Produce the single local file to transfer.

        In NONE mode the caller's file is returned as-is and nothing is staged.
        """
        if mode == CompressionMode.NONE:
            if len(specs) != 1:
                raise IncompatibleMode(
                    f"Uploading without compression requires exactly one file, got {len(specs)}"
                )
            return specs[0].absolute_path

        self.stage_files(specs)
        logger.info(f"Zipping {len(specs)} file(s) into {self.archive_path.name}")
        compress_directory(self.artifact_dir, self.archive_path)
        return self.archive_path

    def stage_files(self, specs: list[UploadSpec]) -> None:
        """Copy every spec into the staging directory, concurrently.

        Waits for all copies before returning and raises the first failure
        in input order.
        """
        self.artifact_dir.mkdir(parents=True, exist_ok=True)

        unique: dict[str, UploadSpec] = {}
        for spec in specs:
            unique.setdefault(spec.upload_path, spec)

        with ThreadPoolExecutor(max_workers=self.copy_workers) as pool:
            futures = [
                pool.submit(self._copy, spec)
                for spec in unique.values()
            ]
            wait(futures)

        for spec, future in zip(unique.values(), futures):
            error = future.exception()
            if error is not None:
                raise ArchiveFailed(
                    f"Failed to stage {spec.absolute_path}: {error}"
                ) from error

        logger.debug(f"Staged {len(unique)} file(s) in {self.artifact_dir}")

    def _copy(self, spec: UploadSpec) -> Path:
        dest = self.staging_root / spec.upload_path
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(spec.absolute_path, dest)
        return dest

    def cleanup(self) -> None:
        """Remove the session directory. Safe to call more than once."""
        if self._cleaned:
            return
        self._cleaned = True
        if self.session_dir.exists():
            logger.debug(f"Removing staging directory {self.session_dir}")
            shutil.rmtree(self.session_dir)


def compress_directory(source_dir: Path, dest_path: Path) -> Path:
    """Zip the contents of source_dir into dest_path with maximum compression.

    Member names are relative to source_dir (the directory itself is not
    included). A failed archive is removed before ArchiveFailed is raised.
    """
    if not source_dir.is_dir():
        raise ArchiveFailed(f"Nothing to compress: {source_dir} is not a directory")

    files = sorted(p for p in source_dir.rglob("*") if p.is_file())
    try:
        with zipfile.ZipFile(
            dest_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9
        ) as archive:
            for path in files:
                archive.write(path, arcname=path.relative_to(source_dir).as_posix())
    except (OSError, zipfile.BadZipFile, ValueError) as e:
        dest_path.unlink(missing_ok=True)
        raise ArchiveFailed(f"Failed to create archive {dest_path}: {e}") from e

    return dest_path
