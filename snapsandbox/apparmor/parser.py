"""
Profile compiler invoker

Builds the apparmor_parser command line for a set of profile sources and
runs it once. On success the kernel has the profiles loaded (or replaced)
and compiled artifacts sit under the cache directory in whatever layout the
parser picked.
"""

import enum
import logging
from typing import List, Optional, Sequence

from snapsandbox.config import SandboxConfig, get_default_config
from snapsandbox.exceptions import ExecutionError
from snapsandbox.apparmor.jobs import number_of_jobs_param
from snapsandbox.apparmor.runner import ParserRunner, SubprocessRunner

logger = logging.getLogger(__name__)


class ParserFlags(enum.IntFlag):
    """Optional apparmor_parser behaviour modifiers."""
    NONE = 0
    # Recompile everything, ignore whatever is in the on-disk cache
    SKIP_READ_CACHE = 1
    # Compile and write the cache without touching the kernel
    SKIP_KERNEL_LOAD = 2
    # Limit the parser to the job count from number_of_jobs_param()
    CONSERVE_CPU = 4


def flag_options(flags: ParserFlags) -> List[str]:
    """Translate flags into parser options, in a fixed order."""
    options = []
    if flags & ParserFlags.CONSERVE_CPU:
        options.append(number_of_jobs_param())
    if flags & ParserFlags.SKIP_KERNEL_LOAD:
        options.append("--skip-kernel-load")
    if flags & ParserFlags.SKIP_READ_CACHE:
        options.append("--skip-read-cache")
    return options


def parser_argv(paths: Sequence[str], cache_dir: str,
                flags: ParserFlags = ParserFlags.NONE,
                config: Optional[SandboxConfig] = None) -> List[str]:
    """
    Build the full apparmor_parser argument vector.

    Args:
        paths: Profile source files, loaded in the given order
        cache_dir: Where compiled artifacts are written
        flags: Extra behaviour modifiers
        config: Supplies the parser executable and the debug toggle

    Returns:
        List[str]: argv, executable first
    """
    if config is None:
        config = get_default_config()

    argv = [
        config.parser_command,
        "--replace",
        "--write-cache",
        "-O", "no-expr-simplify",
        f"--cache-loc={cache_dir}",
    ]
    if not config.debug:
        argv.append("--quiet")
    argv.extend(flag_options(ParserFlags(flags)))
    argv.extend(paths)
    return argv


def load_profiles(paths: Sequence[str], cache_dir: str,
                  flags: ParserFlags = ParserFlags.NONE,
                  config: Optional[SandboxConfig] = None,
                  runner: Optional[ParserRunner] = None) -> None:
    """
    Compile and load profiles into the kernel, replacing existing ones.

    Args:
        paths: Profile source files
        cache_dir: Cache location passed to the parser
        flags: Extra behaviour modifiers
        config: Supplies the parser executable and the debug toggle
        runner: Process runner, SubprocessRunner when omitted

    Raises:
        ExecutionError: apparmor_parser exited with a non-zero status
            or could not be started
    """
    if len(paths) == 0:
        return

    argv = parser_argv(paths, cache_dir, flags, config)
    if runner is None:
        runner = SubprocessRunner()

    logger.debug(f"Loading {len(paths)} AppArmor profile(s) with cache at {cache_dir}")
    try:
        result = runner.run(argv)
    except OSError as e:
        logger.error(f"cannot run {argv[0]}: {e}")
        raise ExecutionError(str(e), "") from e
    if not result.ok:
        logger.error(f"apparmor_parser failed: {result.exit_error()}")
        raise ExecutionError(result.exit_error(), result.output, result.returncode)
