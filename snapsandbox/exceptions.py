"""
Exceptions raised by the snapsandbox AppArmor core.

Filesystem failures are not wrapped: they surface as the built-in OSError
family so callers can inspect errno and filenames directly.
"""

from typing import Optional


class SnapSandboxError(Exception):
    """Base exception for snapsandbox"""
    pass


class ConfigError(SnapSandboxError):
    """Raised when a configuration file or value is invalid"""
    pass


class ExecutionError(SnapSandboxError):
    """Raised when apparmor_parser cannot be run or exits with a non-zero status"""

    def __init__(self, exit_error: str, output: str = "", returncode: Optional[int] = None):
        self.exit_error = exit_error
        self.output = output
        self.returncode = returncode
        super().__init__(
            f"cannot load apparmor profiles: {exit_error}\n"
            f"apparmor_parser output:\n"
            f"{output}"
        )


class ParseError(SnapSandboxError):
    """Base exception for malformed kernel profile listings"""
    pass


class NewlineMismatchError(ParseError):
    """Raised when a listing line does not end where a newline is expected"""

    def __init__(self, message: str = "newline in format does not match input"):
        super().__init__(message)


class ProfileSyntaxError(ParseError):
    """Raised when a listing line does not have the name (mode) shape"""

    def __init__(self, message: str = "syntax error, expected: name (mode)"):
        super().__init__(message)
