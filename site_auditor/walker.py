"""
Directory traversal for site_auditor.

Symlinked directories are never followed, which keeps every walk finite even
when a project contains link cycles.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from site_auditor.errors import DirectoryNotFound
from site_auditor.utils import should_exclude

if TYPE_CHECKING:
    from typing import Iterable, Iterator

logger = logging.getLogger(__name__)


def ensure_directory(root: Path) -> Path:
    """
    Resolve the scan root.

    Raises:
        DirectoryNotFound: If ``root`` is missing or not a directory.
    """
    if not root.is_dir():
        raise DirectoryNotFound(str(root))
    return root.resolve()


def walk_tree(root: Path, exclude: list[str]) -> Iterator[tuple[Path, list[str], list[str]]]:
    """
    os.walk with directory pruning and a stable sibling order.

    Yields:
        (directory, kept subdirectory names, file names) tuples, depth-first.
    """
    for current, dirs, files in os.walk(root, onerror=_log_walk_error):
        current_path = Path(current)
        dirs[:] = sorted(
            d for d in dirs
            if not should_exclude(current_path / d, exclude)
            and not (current_path / d).is_symlink()
        )
        yield current_path, dirs, sorted(files)


def _log_walk_error(error: OSError) -> None:
    logger.debug("Could not list %s: %s", error.filename, error)


def walk_files(
    root: Path,
    extensions: Iterable[str] | None,
    exclude: list[str],
) -> Iterator[Path]:
    """
    Yield files under ``root`` depth-first.

    Args:
        root: Directory to walk.
        extensions: Lowercase extensions with leading dot to keep, or None
            for every file.
        exclude: Directory names and ``*suffix`` file patterns to skip.

    Raises:
        DirectoryNotFound: If ``root`` does not exist.
    """
    root = ensure_directory(root)
    allowed = frozenset(extensions) if extensions is not None else None
    for current, _dirs, files in walk_tree(root, exclude):
        for filename in files:
            filepath = current / filename
            if should_exclude(filepath, exclude):
                continue
            if allowed is not None and filepath.suffix.lower() not in allowed:
                continue
            yield filepath


def walk_dirs(root: Path, exclude: list[str]) -> list[Path]:
    """
    List ``root`` and every non-excluded directory below it, empty ones included.

    Raises:
        DirectoryNotFound: If ``root`` does not exist.
    """
    root = ensure_directory(root)
    return [current for current, _dirs, _files in walk_tree(root, exclude)]
