"""
Unit tests for loading profiles with apparmor_parser
"""

import os
import sys
import unittest
from unittest.mock import Mock, patch

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from snapsandbox.config import SandboxConfig
from snapsandbox.exceptions import ExecutionError, SnapSandboxError
from snapsandbox.apparmor.parser import ParserFlags, load_profiles, parser_argv, flag_options
from snapsandbox.testing import RecordingRunner

CACHE_DIR = "/var/cache/apparmor"
BASE_ARGS = [
    "apparmor_parser", "--replace", "--write-cache", "-O", "no-expr-simplify",
    "--cache-loc=/var/cache/apparmor",
]


class TestLoadProfiles(unittest.TestCase):
    """Test load_profiles()"""

    def setUp(self):
        self.config = SandboxConfig()
        self.runner = RecordingRunner()

    def test_runs_parser_replace(self):
        """Test parser runs with --replace"""
        load_profiles(["/path/to/snap.samba.smbd"], CACHE_DIR,
                      config=self.config, runner=self.runner)
        self.assertEqual(self.runner.calls, [
            BASE_ARGS + ["--quiet", "/path/to/snap.samba.smbd"],
        ])

    def test_many_profiles_keep_order(self):
        """Test many profiles keep order"""
        load_profiles(["/path/to/snap.samba.smbd", "/path/to/another.profile"], CACHE_DIR,
                      config=self.config, runner=self.runner)
        self.assertEqual(self.runner.calls, [
            BASE_ARGS + ["--quiet", "/path/to/snap.samba.smbd", "/path/to/another.profile"],
        ])

    def test_no_profiles_does_not_run_parser(self):
        """Test no profiles does not run parser"""
        load_profiles([], CACHE_DIR, config=self.config, runner=self.runner)
        self.assertEqual(self.runner.calls, [])

    def test_no_profiles_does_not_spawn_process(self):
        """Test no profiles does not spawn process"""
        with patch("snapsandbox.apparmor.runner.subprocess.run") as run:
            load_profiles([], CACHE_DIR, config=self.config)
        run.assert_not_called()

    def test_reports_errors(self):
        """Test parser failure is reported"""
        runner = RecordingRunner(returncode=42)
        with self.assertRaises(ExecutionError) as ctx:
            load_profiles(["/path/to/snap.samba.smbd"], CACHE_DIR,
                          config=self.config, runner=runner)

        self.assertEqual(str(ctx.exception),
                         "cannot load apparmor profiles: exit status 42\n"
                         "apparmor_parser output:\n")
        self.assertEqual(ctx.exception.returncode, 42)
        self.assertEqual(runner.calls, [
            BASE_ARGS + ["--quiet", "/path/to/snap.samba.smbd"],
        ])

    def test_error_carries_parser_output(self):
        """Test error carries parser output"""
        runner = RecordingRunner(returncode=1, output="AppArmor parser error at line 3\n")
        with self.assertRaises(SnapSandboxError) as ctx:
            load_profiles(["/path/to/snap.foo.bar"], CACHE_DIR,
                          config=self.config, runner=runner)

        self.assertEqual(str(ctx.exception),
                         "cannot load apparmor profiles: exit status 1\n"
                         "apparmor_parser output:\n"
                         "AppArmor parser error at line 3\n")
        self.assertEqual(ctx.exception.output, "AppArmor parser error at line 3\n")

    def test_missing_parser_executable(self):
        """Test missing parser executable"""
        config = SandboxConfig(parser_command="/nonexistent/apparmor_parser")
        with self.assertRaises(ExecutionError) as ctx:
            load_profiles(["/path/to/snap.foo.bar"], CACHE_DIR, config=config)

        self.assertIsInstance(ctx.exception.__cause__, FileNotFoundError)
        self.assertTrue(str(ctx.exception).startswith("cannot load apparmor profiles: "))
        self.assertTrue(str(ctx.exception).endswith("\napparmor_parser output:\n"))
        self.assertIsNone(ctx.exception.returncode)

    def test_parser_not_executable(self):
        """Test parser not executable"""
        runner = Mock()
        runner.run.side_effect = PermissionError(13, "Permission denied")
        with self.assertRaises(ExecutionError) as ctx:
            load_profiles(["/path/to/snap.foo.bar"], CACHE_DIR,
                          config=self.config, runner=runner)

        self.assertEqual(str(ctx.exception),
                         "cannot load apparmor profiles: [Errno 13] Permission denied\n"
                         "apparmor_parser output:\n")

    def test_error_on_signal(self):
        """Test error on signal"""
        runner = RecordingRunner(returncode=-9)
        with self.assertRaises(ExecutionError) as ctx:
            load_profiles(["/path/to/snap.foo.bar"], CACHE_DIR,
                          config=self.config, runner=runner)
        self.assertTrue(str(ctx.exception).startswith(
            "cannot load apparmor profiles: signal: killed\n"))

    def test_debug_keeps_parser_verbose(self):
        """Test debug keeps parser verbose"""
        config = SandboxConfig(debug=True)
        load_profiles(["/path/to/snap.samba.smbd"], CACHE_DIR,
                      config=config, runner=self.runner)
        self.assertEqual(self.runner.calls, [
            BASE_ARGS + ["/path/to/snap.samba.smbd"],
        ])

    def test_skip_read_cache(self):
        """Test skip read cache"""
        load_profiles(["/path/to/snap.samba.smbd"], CACHE_DIR, ParserFlags.SKIP_READ_CACHE,
                      config=self.config, runner=self.runner)
        self.assertEqual(self.runner.calls, [
            BASE_ARGS + ["--quiet", "--skip-read-cache", "/path/to/snap.samba.smbd"],
        ])

    def test_custom_parser_command(self):
        """Test custom parser command"""
        config = SandboxConfig(parser_command="/usr/lib/snapd/apparmor_parser")
        load_profiles(["/p"], CACHE_DIR, config=config, runner=self.runner)
        self.assertEqual(self.runner.calls[0][0], "/usr/lib/snapd/apparmor_parser")


class TestParserArgv(unittest.TestCase):
    """Test argument construction"""

    def test_cache_location(self):
        """Test cache location"""
        argv = parser_argv(["/p"], "/tmp/cache", config=SandboxConfig())
        self.assertIn("--cache-loc=/tmp/cache", argv)

    def test_flag_order(self):
        """Test flag order"""
        flags = ParserFlags.SKIP_READ_CACHE | ParserFlags.SKIP_KERNEL_LOAD | ParserFlags.CONSERVE_CPU
        with patch("snapsandbox.apparmor.jobs.available_cpus", return_value=10):
            options = flag_options(flags)
        self.assertEqual(options, ["-j8", "--skip-kernel-load", "--skip-read-cache"])

    def test_no_flags(self):
        """Test no flags"""
        self.assertEqual(flag_options(ParserFlags.NONE), [])

    def test_conserve_cpu_is_opt_in(self):
        """Test conserve cpu is opt in"""
        with patch("snapsandbox.apparmor.jobs.available_cpus", return_value=4):
            argv = parser_argv(["/p"], CACHE_DIR, config=SandboxConfig())
        self.assertFalse(any(arg.startswith("-j") for arg in argv))


if __name__ == '__main__':
    unittest.main()
