"""
Test helpers for code that drives apparmor_parser.
"""

from typing import List, Sequence

from snapsandbox.apparmor.runner import ParserResult


class RecordingRunner:
    """
    Parser runner that records every argv and returns a canned result.

    Example:
        runner = RecordingRunner(returncode=42, output="oops")
        load_profiles(["/path/to/snap.foo.bar"], cache_dir, runner=runner)
    """

    def __init__(self, returncode: int = 0, output: str = ""):
        self.result = ParserResult(returncode, output)
        self.calls: List[List[str]] = []

    def run(self, argv: Sequence[str]) -> ParserResult:
        self.calls.append(list(argv))
        return self.result
