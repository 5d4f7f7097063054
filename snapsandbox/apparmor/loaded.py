"""
Loaded-profile query

The kernel lists every loaded profile in securityfs, one ``name (mode)``
entry per line. Only snap profiles are reported; everything else (system
daemons, desktop helpers, ``//`` child profiles) is dropped.
"""

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from snapsandbox.config import SandboxConfig, get_default_config
from snapsandbox.exceptions import NewlineMismatchError, ProfileSyntaxError

logger = logging.getLogger(__name__)

SNAP_PROFILE_PREFIX = "snap."
HIERARCHY_SEPARATOR = "//"

_MODE_RE = re.compile(r"^\((?P<mode>[^()\s]+)\)$")


class ProfileMode(str, Enum):
    """Modes the kernel reports for a loaded profile."""
    ENFORCE = "enforce"
    COMPLAIN = "complain"
    KILL = "kill"
    UNCONFINED = "unconfined"


@dataclass(frozen=True)
class LoadedProfileEntry:
    name: str
    mode: str

    @property
    def profile_mode(self) -> Optional[ProfileMode]:
        """The mode as a ProfileMode, or None for modes this module does not know."""
        try:
            return ProfileMode(self.mode)
        except ValueError:
            return None


def is_snap_profile(name: str) -> bool:
    """Whether a kernel profile name belongs to a snap (child profiles excluded)."""
    return name.startswith(SNAP_PROFILE_PREFIX) and HIERARCHY_SEPARATOR not in name


def _parse_line(line: str, terminated: bool) -> LoadedProfileEntry:
    fields = line.split()
    if len(fields) < 2:
        raise ProfileSyntaxError()
    if len(fields) > 2 or not terminated:
        raise NewlineMismatchError()

    name, mode = fields
    match = _MODE_RE.match(mode)
    if match is None:
        raise ProfileSyntaxError()
    return LoadedProfileEntry(name, match.group("mode"))


def parse_profiles_listing(text: str) -> List[LoadedProfileEntry]:
    """
    Parse the kernel profile listing and keep the snap entries.

    Parsing stops at the first malformed line; no partial result is
    returned.

    Args:
        text: Full listing contents

    Returns:
        List[LoadedProfileEntry]: Snap profiles in listing order

    Raises:
        NewlineMismatchError: A line has extra fields or no trailing newline
        ProfileSyntaxError: A line is not of the form "name (mode)"
    """
    lines = text.split("\n")
    # Whatever follows the last newline; empty for a well-formed listing
    tail = lines.pop()

    entries = [_parse_line(line, True) for line in lines]
    if tail:
        entries.append(_parse_line(tail, False))

    return [entry for entry in entries if is_snap_profile(entry.name)]


def loaded_profile_entries(config: Optional[SandboxConfig] = None) -> List[LoadedProfileEntry]:
    """
    Read the kernel listing and return the loaded snap profiles with modes.

    A missing listing file is an error, not an empty result.

    Args:
        config: Supplies profiles_path

    Returns:
        List[LoadedProfileEntry]
    """
    if config is None:
        config = get_default_config()

    # Undecodable bytes are kept as surrogates so names round-trip with os.fsencode
    with open(config.profiles_path, "r", encoding="utf-8", errors="surrogateescape") as f:
        text = f.read()

    entries = parse_profiles_listing(text)
    logger.debug(f"{len(entries)} snap profile(s) loaded in the kernel")
    return entries


def loaded_profiles(config: Optional[SandboxConfig] = None) -> List[str]:
    """Names of the snap profiles currently loaded in the kernel."""
    return [entry.name for entry in loaded_profile_entries(config)]
