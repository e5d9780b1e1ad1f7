"""Recursive file discovery for add_glob().

Matching is performed against file names only: directory components in
the pattern are dropped, and every non-symlinked subdirectory is visited
regardless of the pattern. Within a directory, matching files come
first (sorted by name), followed by each subdirectory in name order.
"""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterator
from pathlib import Path, PurePath

from asset_compiler.errors import AssetResolutionError

DEFAULT_PATTERN = "*"


def find_files(base_path: str | os.PathLike[str], pattern: str = DEFAULT_PATTERN) -> list[str]:
    """Return files under ``base_path`` whose name matches ``pattern``.

    Args:
        base_path: Directory to search.
        pattern: Filename wildcard (``*``, ``?``, ``[...]``). Only its last
            path component is used, so ``"css/*.css"`` behaves like ``"*.css"``.

    Returns:
        Matching file paths in traversal order.

    Raises:
        AssetResolutionError: If ``base_path`` is not a directory or any
            visited directory cannot be read.

    Example:
        >>> find_files("assets", "*.scss")
        ['assets/main.scss', 'assets/vendor/grid.scss']
    """
    pattern = PurePath(pattern).name or DEFAULT_PATTERN
    base = os.fspath(base_path)

    if not Path(base).is_dir():
        raise AssetResolutionError(base, "directory not found")

    return list(_walk(base, pattern))


def _walk(directory: str, pattern: str) -> Iterator[str]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise AssetResolutionError(
            directory,
            "directory is not readable",
            internal_details=str(e),
        ) from e

    match_hidden = pattern.startswith(".")
    subdirectories: list[str] = []

    for entry in entries:
        hidden = entry.name.startswith(".")
        # Symlinked directories are neither matched nor descended into
        if entry.is_dir(follow_symlinks=False):
            if not hidden:
                subdirectories.append(entry.path)
            continue
        if hidden and not match_hidden:
            continue
        if entry.is_file() and fnmatch.fnmatchcase(entry.name, pattern):
            yield entry.path

    for subdirectory in subdirectories:
        yield from _walk(subdirectory, pattern)
