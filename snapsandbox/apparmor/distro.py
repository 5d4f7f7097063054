"""
Locate the snap-confine AppArmor profile shipped by the host distribution.
"""

import os
import logging
from typing import Optional

from snapsandbox.config import SandboxConfig, get_default_config

logger = logging.getLogger(__name__)

# Priority order. Some distributions move the original profile to a ".real"
# name when they install a wrapper under the plain name.
SNAP_CONFINE_PROFILE_NAMES = (
    "usr.lib.snapd.snap-confine.real",
    "usr.lib.snapd.snap-confine",
    "usr.libexec.snapd.snap-confine",
)


def snap_confine_distro_profile_path(config: Optional[SandboxConfig] = None) -> str:
    """
    Return the distribution-provided snap-confine profile, or "" if none.

    Args:
        config: Configuration providing conf_dir

    Returns:
        str: Path of the first candidate that is a regular file, or ""
    """
    if config is None:
        config = get_default_config()

    for name in SNAP_CONFINE_PROFILE_NAMES:
        path = os.path.join(config.conf_dir, name)
        if os.path.isfile(path):
            logger.debug(f"Using distribution snap-confine profile {path}")
            return path

    return ""
