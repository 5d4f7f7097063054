#!/usr/bin/env python3
"""
snap-apparmor - operator tool for snap AppArmor profiles
"""

import sys
import json
import argparse
from typing import List, Optional

import tabulate
import yaml

from snapsandbox import __version__
from snapsandbox.config import SandboxConfig, load_config
from snapsandbox.exceptions import SnapSandboxError
from snapsandbox.logging_setup import configure_logging
from snapsandbox.apparmor import (
    ParserFlags, load_profiles, unload_profiles, loaded_profile_entries,
    reload_all_snap_profiles, number_of_jobs_param,
    snap_confine_distro_profile_path
)


class OutputFormat:
    """Output formats."""
    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def format_entries(entries, output_format: str) -> str:
    """
    Format loaded profile entries.

    Args:
        entries: LoadedProfileEntry list
        output_format: One of OutputFormat

    Returns:
        Formatted string
    """
    data = [{"name": entry.name, "mode": entry.mode} for entry in entries]

    if output_format == OutputFormat.JSON:
        return json.dumps(data, indent=2)

    elif output_format == OutputFormat.YAML:
        return yaml.dump(data, default_flow_style=False)

    else:
        rows = [[entry.name, entry.mode] for entry in entries]
        return tabulate.tabulate(rows, headers=["NAME", "MODE"], tablefmt="plain")


def cmd_status(args, config: SandboxConfig):
    """List snap profiles loaded in the kernel."""
    entries = loaded_profile_entries(config)
    print(format_entries(entries, args.output))


def cmd_reload(args, config: SandboxConfig):
    """Reload all snap profiles."""
    reload_all_snap_profiles(config)
    print("AppArmor profiles reloaded")


def cmd_load(args, config: SandboxConfig):
    """Load the given profile files."""
    flags = ParserFlags.NONE
    if args.skip_read_cache:
        flags |= ParserFlags.SKIP_READ_CACHE
    if args.skip_kernel_load:
        flags |= ParserFlags.SKIP_KERNEL_LOAD
    if args.conserve_cpu:
        flags |= ParserFlags.CONSERVE_CPU

    cache_dir = args.cache_dir or config.cache_dir
    load_profiles(args.paths, cache_dir, flags, config=config)
    print(f"{len(args.paths)} profile(s) loaded")


def cmd_unload(args, config: SandboxConfig):
    """Drop cached artifacts for the given profiles."""
    cache_dir = args.cache_dir or config.cache_dir
    unload_profiles(args.names, cache_dir)


def cmd_distro_profile(args, config: SandboxConfig):
    """Show the distribution snap-confine profile."""
    path = snap_confine_distro_profile_path(config)
    if not path:
        print("no distribution snap-confine profile found", file=sys.stderr)
        return 1
    print(path)


def cmd_jobs(args, config: SandboxConfig):
    """Show the apparmor_parser job-count argument."""
    print(number_of_jobs_param())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snap-apparmor",
                                     description="Manage snap AppArmor profiles")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--root", help="Relocate all system paths below this directory")
    parser.add_argument("--debug", action="store_true",
                        help="Verbose logging and apparmor_parser output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # status command
    status_parser = subparsers.add_parser("status", help="List loaded snap profiles")
    status_parser.add_argument("-o", "--output", choices=["table", "json", "yaml"],
                               default="table", help="Output format")
    status_parser.set_defaults(func=cmd_status)

    # reload command
    reload_parser = subparsers.add_parser("reload", help="Reload all snap profiles")
    reload_parser.set_defaults(func=cmd_reload)

    # load command
    load_parser = subparsers.add_parser("load", help="Load profile files")
    load_parser.add_argument("paths", nargs="+", help="Profile files")
    load_parser.add_argument("--cache-dir", help="Cache location")
    load_parser.add_argument("--skip-read-cache", action="store_true",
                             help="Recompile instead of using cached artifacts")
    load_parser.add_argument("--skip-kernel-load", action="store_true",
                             help="Only compile and write the cache")
    load_parser.add_argument("--conserve-cpu", action="store_true",
                             help="Limit the number of parser jobs")
    load_parser.set_defaults(func=cmd_load)

    # unload command
    unload_parser = subparsers.add_parser("unload", help="Remove cached profiles")
    unload_parser.add_argument("names", nargs="+", help="Profile names")
    unload_parser.add_argument("--cache-dir", help="Cache location")
    unload_parser.set_defaults(func=cmd_unload)

    # distro-profile command
    distro_parser = subparsers.add_parser("distro-profile",
                                          help="Show the distribution snap-confine profile")
    distro_parser.set_defaults(func=cmd_distro_profile)

    # jobs command
    jobs_parser = subparsers.add_parser("jobs", help="Show the parser job-count argument")
    jobs_parser.set_defaults(func=cmd_jobs)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        return 2

    overrides = {}
    if args.root:
        overrides["root_dir"] = args.root
    if args.debug:
        overrides["debug"] = True

    try:
        if args.config:
            config = load_config(args.config, **overrides)
        else:
            config = SandboxConfig.from_env(**overrides)

        configure_logging(config.debug)
        return args.func(args, config) or 0
    except (SnapSandboxError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
