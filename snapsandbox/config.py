"""
snapsandbox configuration

Directory layout and runtime toggles for the AppArmor core. Every path is
derived from ``root_dir`` unless overridden explicitly, so tests can relocate
the whole tree into a temporary directory without touching process state.
"""

import os
import logging
from typing import Dict, Mapping, Optional, Any

import yaml
from pydantic import BaseModel, ValidationError, field_validator, model_validator

from snapsandbox.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_ROOT = "SNAPSANDBOX_ROOT"
ENV_DEBUG = "SNAPSANDBOX_DEBUG"
ENV_PARSER = "SNAPSANDBOX_PARSER"

DEFAULT_CONF_DIR = "/etc/apparmor.d"
DEFAULT_CACHE_DIR = "/var/cache/apparmor"
DEFAULT_SNAP_APPARMOR_DIR = "/var/lib/snapd/apparmor/profiles"
DEFAULT_PROFILES_PATH = "/sys/kernel/security/apparmor/profiles"

_TRUTHY = {"1", "true", "yes", "on"}


def under_root(root_dir: str, path: str) -> str:
    """Join an absolute system path below a (possibly relocated) root."""
    return os.path.join(root_dir, path.lstrip("/"))


def env_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


class SandboxConfig(BaseModel):
    """Paths and toggles used by the AppArmor core.

    ``debug`` keeps apparmor_parser verbose (no ``--quiet``). It is a plain
    value passed to the loader rather than an environment lookup at call time.
    """
    root_dir: str = "/"
    debug: bool = False
    parser_command: str = "apparmor_parser"
    conf_dir: Optional[str] = None
    cache_dir: Optional[str] = None
    snap_apparmor_dir: Optional[str] = None
    profiles_path: Optional[str] = None

    @field_validator("root_dir")
    @classmethod
    def validate_root_dir(cls, v):
        if not v:
            raise ValueError("root_dir must not be empty")
        return v

    @field_validator("parser_command")
    @classmethod
    def validate_parser_command(cls, v):
        if not v or not v.strip():
            raise ValueError("parser_command must not be empty")
        return v

    @model_validator(mode="after")
    def fill_derived_paths(self):
        if self.conf_dir is None:
            self.conf_dir = under_root(self.root_dir, DEFAULT_CONF_DIR)
        if self.cache_dir is None:
            self.cache_dir = under_root(self.root_dir, DEFAULT_CACHE_DIR)
        if self.snap_apparmor_dir is None:
            self.snap_apparmor_dir = under_root(self.root_dir, DEFAULT_SNAP_APPARMOR_DIR)
        if self.profiles_path is None:
            self.profiles_path = under_root(self.root_dir, DEFAULT_PROFILES_PATH)
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 **overrides: Any) -> "SandboxConfig":
        """
        Build a configuration from environment variables.

        Args:
            environ: Mapping to read instead of os.environ
            **overrides: Field values that take precedence over the environment

        Returns:
            SandboxConfig
        """
        if environ is None:
            environ = os.environ

        values: Dict[str, Any] = {}
        if environ.get(ENV_ROOT):
            values["root_dir"] = environ[ENV_ROOT]
        if ENV_DEBUG in environ:
            values["debug"] = env_bool(environ.get(ENV_DEBUG))
        if environ.get(ENV_PARSER):
            values["parser_command"] = environ[ENV_PARSER]
        values.update(overrides)

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"invalid configuration: {e}") from e


def load_config(path: str, environ: Optional[Mapping[str, str]] = None,
                **overrides: Any) -> SandboxConfig:
    """
    Load configuration from a YAML file layered over the environment.

    The file holds a mapping of SandboxConfig field names. A missing file is
    an error; an empty file yields the environment defaults. Keys present
    in the file take precedence over environment variables.

    Args:
        path: Path to the YAML file
        environ: Mapping to read instead of os.environ
        **overrides: Field values that take precedence over the file

    Returns:
        SandboxConfig
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"cannot parse {path}: expected a mapping at top level")

    unknown = set(data) - set(SandboxConfig.model_fields)
    if unknown:
        raise ConfigError(f"cannot parse {path}: unknown keys {sorted(unknown)}")

    logger.debug(f"Loaded configuration from {path}")
    data.update(overrides)
    return SandboxConfig.from_env(environ, **data)


def get_default_config() -> SandboxConfig:
    """Return a configuration built from the process environment."""
    return SandboxConfig.from_env()
