"""
Compiled profile cache maintenance

apparmor_parser writes artifacts either flat (``cache/<name>``) or in a
forest of per-feature-set directories (``cache/<hash>.0/<name>``, next to a
``.features`` file). Removing an artifact does not unload anything from the
kernel; it only makes sure the next load compiles from source.
"""

import os
import errno
import logging
from typing import Sequence

logger = logging.getLogger(__name__)

FEATURES_FILE = ".features"


def _remove_file(path: str) -> bool:
    """Remove path; return False if there was no file to remove."""
    try:
        os.remove(path)
    except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
        return False
    logger.debug(f"Removed cached profile {path}")
    return True


def _forest_dirs(cache_dir: str):
    """Immediate subdirectories of the cache root, in a stable order."""
    try:
        with os.scandir(cache_dir) as entries:
            dirs = [entry.path for entry in entries if entry.is_dir(follow_symlinks=False)]
    except OSError as e:
        if e.errno in (errno.ENOENT, errno.ENOTDIR):
            return []
        raise
    return sorted(dirs)


def unload_profiles(names: Sequence[str], cache_dir: str) -> None:
    """
    Remove cached artifacts for the named profiles.

    Missing artifacts are not an error. Feature marker files are never
    removed.

    Args:
        names: Profile names (a profile path is reduced to its basename)
        cache_dir: Cache root
    """
    for name in names:
        name = os.path.basename(name)
        if not name or name == FEATURES_FILE:
            continue

        if _remove_file(os.path.join(cache_dir, name)):
            continue

        for subdir in _forest_dirs(cache_dir):
            if _remove_file(os.path.join(subdir, name)):
                break
