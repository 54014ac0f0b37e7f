"""Expansion of user-supplied paths and glob patterns into files."""

import glob
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Files matched by a search and the directory they share."""

    files: list[Path]
    root_directory: Path | None


def find_files(patterns: list[str]) -> SearchResult:
    """Expand patterns into a de-duplicated, ordered list of files.

    A pattern may be a file, a directory (all files beneath it) or a glob
    ("**" is recursive). The root directory is the least common ancestor of
    all matches, or the parent directory when only one file matched.
    """
    files: list[Path] = []
    seen: set[Path] = set()

    for pattern in patterns:
        expanded = os.path.expanduser(pattern)
        matches = sorted(glob.glob(expanded, recursive=True))
        if not matches:
            logger.debug(f"No matches for {pattern}")

        for match in matches:
            path = Path(match).resolve()
            candidates = (
                sorted(p for p in path.rglob("*") if p.is_file())
                if path.is_dir()
                else [path]
            )
            for candidate in candidates:
                if candidate not in seen:
                    seen.add(candidate)
                    files.append(candidate)

    return SearchResult(files=files, root_directory=least_common_ancestor(files))


def least_common_ancestor(files: list[Path]) -> Path | None:
    """Deepest directory containing every file."""
    if not files:
        return None
    if len(files) == 1:
        return files[0].parent
    return Path(os.path.commonpath([str(f.parent) for f in files]))
