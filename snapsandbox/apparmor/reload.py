"""
Reload every snap profile, plus the distribution snap-confine profile.
"""

import os
import errno
import logging
from typing import Callable, List, Optional

from snapsandbox.config import SandboxConfig, get_default_config
from snapsandbox.apparmor.distro import snap_confine_distro_profile_path
from snapsandbox.apparmor.parser import ParserFlags, load_profiles

logger = logging.getLogger(__name__)


def snap_profile_paths(config: SandboxConfig) -> List[str]:
    """Regular files in the snap profile directory, sorted by name."""
    try:
        with os.scandir(config.snap_apparmor_dir) as entries:
            paths = [entry.path for entry in entries if entry.is_file()]
    except OSError as e:
        if e.errno == errno.ENOENT:
            return []
        raise
    return sorted(paths)


def reload_set(config: SandboxConfig,
               distro_profile_path: Optional[Callable[[SandboxConfig], str]] = None) -> List[str]:
    """
    Build the list of profiles a full reload compiles.

    Args:
        config: Supplies snap_apparmor_dir and conf_dir
        distro_profile_path: Resolver for the distribution profile

    Returns:
        List[str]: Snap profiles, then the distribution profile if found
    """
    if distro_profile_path is None:
        distro_profile_path = snap_confine_distro_profile_path

    paths = snap_profile_paths(config)
    distro_profile = distro_profile_path(config)
    if distro_profile:
        paths.append(distro_profile)
    return paths


def reload_all_snap_profiles(config: Optional[SandboxConfig] = None,
                             load: Optional[Callable] = None,
                             distro_profile_path: Optional[Callable[[SandboxConfig], str]] = None) -> None:
    """
    Recompile and reload all snap profiles from source.

    The on-disk parser cache is bypassed so the result reflects the current
    parser and sources even if the cache was written by an older parser.
    Errors from the loader are raised unchanged.

    Args:
        config: Directory layout and debug toggle
        load: Loader with the load_profiles signature
        distro_profile_path: Resolver for the distribution profile
    """
    if config is None:
        config = get_default_config()

    paths = reload_set(config, distro_profile_path)
    logger.info(f"Reloading {len(paths)} AppArmor profile(s)")

    if load is None:
        load_profiles(paths, config.cache_dir, ParserFlags.SKIP_READ_CACHE, config=config)
    else:
        load(paths, config.cache_dir, ParserFlags.SKIP_READ_CACHE)
