"""
Parallelism hint for apparmor_parser.
"""

import math
from typing import Optional

import psutil


def available_cpus() -> int:
    """CPUs this process may run on, honouring its affinity mask."""
    try:
        return len(psutil.Process().cpu_affinity())
    except (AttributeError, NotImplementedError, psutil.Error):
        # No affinity support on this platform
        return psutil.cpu_count() or 1


def number_of_jobs(cpu_count: Optional[int] = None) -> int:
    """Number of parser jobs to use: 80% of the CPUs, at least one."""
    if cpu_count is None:
        cpu_count = available_cpus()
    return max(1, int(math.floor(cpu_count * 0.8)))


def number_of_jobs_param(cpu_count: Optional[int] = None) -> str:
    """
    Build the apparmor_parser job-count argument.

    Args:
        cpu_count: Available CPUs; detected with psutil when omitted

    Returns:
        str: Token of the form "-jN"
    """
    return f"-j{number_of_jobs(cpu_count)}"
