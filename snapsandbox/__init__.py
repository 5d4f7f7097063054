"""
snapsandbox - AppArmor profile management for snap confinement
"""

__version__ = "1.0.0"

from .config import SandboxConfig, load_config, get_default_config
from .exceptions import (
    SnapSandboxError, ConfigError, ExecutionError,
    ParseError, NewlineMismatchError, ProfileSyntaxError
)

__all__ = [
    'SandboxConfig', 'load_config', 'get_default_config',
    'SnapSandboxError', 'ConfigError', 'ExecutionError',
    'ParseError', 'NewlineMismatchError', 'ProfileSyntaxError'
]
