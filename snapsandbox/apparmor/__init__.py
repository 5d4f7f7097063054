"""
AppArmor support for snap confinement

This package drives apparmor_parser to load snap profiles into the kernel,
keeps the compiled profile cache in step with installed snaps, and reports
which snap profiles the kernel currently has loaded.
"""

from .parser import ParserFlags, load_profiles, parser_argv
from .cache import unload_profiles
from .loaded import (
    LoadedProfileEntry, ProfileMode, is_snap_profile,
    loaded_profile_entries, loaded_profiles, parse_profiles_listing
)
from .reload import reload_all_snap_profiles
from .jobs import number_of_jobs_param
from .distro import snap_confine_distro_profile_path
from .runner import ParserResult, ParserRunner, SubprocessRunner

__all__ = [
    'ParserFlags', 'load_profiles', 'parser_argv', 'unload_profiles',
    'LoadedProfileEntry', 'ProfileMode', 'is_snap_profile',
    'loaded_profile_entries', 'loaded_profiles', 'parse_profiles_listing',
    'reload_all_snap_profiles', 'number_of_jobs_param',
    'snap_confine_distro_profile_path',
    'ParserResult', 'ParserRunner', 'SubprocessRunner'
]
