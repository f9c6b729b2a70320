import os
import subprocess
import tempfile
import unittest
from unittest.mock import patch

import lexer
import runner
from exceptions import SubstitutionFailed

posix_only = unittest.skipUnless(os.name == "posix", "needs a POSIX shell")


class TestShellCommand(unittest.TestCase):
    def test_posix_uses_shell_variable(self):
        with patch.dict(os.environ, {"SHELL": "/bin/bash"}, clear=False):
            self.assertEqual(["/bin/bash", "-c", "echo a"], runner.shell_command("echo a", platform="posix"))

    def test_posix_falls_back_to_bin_sh(self):
        with patch.dict(os.environ, {"SHELL": ""}, clear=False):
            self.assertEqual(["/bin/sh", "-c", "x"], runner.shell_command("x", platform="posix"))
        env = {k: v for k, v in os.environ.items() if k != "SHELL"}
        with patch.dict(os.environ, env, clear=True):
            self.assertEqual(["/bin/sh", "-c", "x"], runner.shell_command("x", platform="posix"))

    def test_windows_uses_comspec(self):
        with patch.dict(os.environ, {"COMSPEC": r"C:\Windows\system32\cmd.exe"}, clear=False):
            self.assertEqual([r"C:\Windows\system32\cmd.exe", "/c", "dir"],
                             runner.shell_command("dir", platform="nt"))
        with patch.dict(os.environ, {"COMSPEC": ""}, clear=False):
            self.assertEqual(["cmd.exe", "/c", "dir"], runner.shell_command("dir", platform="nt"))


class TestStripTrailingNewline(unittest.TestCase):
    def test_strips_at_most_one(self):
        self.assertEqual("a", runner.strip_trailing_newline("a\n"))
        self.assertEqual("a\n", runner.strip_trailing_newline("a\n\n"))
        self.assertEqual("a", runner.strip_trailing_newline("a\r\n"))
        self.assertEqual("a", runner.strip_trailing_newline("a"))
        self.assertEqual("", runner.strip_trailing_newline(""))


class TestRunSubstitution(unittest.TestCase):
    def setUp(self):
        # keep the tests independent of the user's login shell
        patcher = patch.dict(os.environ, {"SHELL": "/bin/sh"}, clear=False)
        patcher.start()
        self.addCleanup(patcher.stop)

    @posix_only
    def test_returns_output(self):
        self.assertEqual("foo", runner.run_substitution("echo foo"))

    @posix_only
    def test_keeps_inner_newlines(self):
        self.assertEqual("a\nb\n", runner.run_substitution("printf 'a\\nb\\n\\n'"))

    @posix_only
    def test_runs_in_cwd(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            out = runner.run_substitution("pwd", cwd=tmpdir)
        self.assertEqual(os.path.realpath(tmpdir), os.path.realpath(out))

    @posix_only
    def test_non_zero_exit_raises(self):
        with self.assertRaises(SubstitutionFailed) as ctx:
            runner.run_substitution("echo partial; echo broken >&2; exit 3")
        err = ctx.exception
        self.assertEqual(3, err.returncode)
        self.assertEqual("partial\n", err.stdout)
        self.assertEqual("broken\n", err.stderr)
        self.assertIn("broken", str(err))
        self.assertEqual("echo partial; echo broken >&2; exit 3", err.command)

    def test_spawn_failure_raises(self):
        with patch.object(runner, "shell_command", return_value=["/nonexistent/shell", "-c", "x"]):
            with self.assertRaises(SubstitutionFailed) as ctx:
                runner.run_substitution("x")
        self.assertIsNone(ctx.exception.returncode)
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_passes_command_as_single_argument(self):
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="ok\n", stderr="")
        with patch.object(runner.subprocess, "run", return_value=completed) as mock_run:
            out = runner.run_substitution("echo 'a b' | tr a-z A-Z", cwd="/tmp")
        self.assertEqual("ok", out)
        argv = mock_run.call_args.args[0]
        self.assertEqual("echo 'a b' | tr a-z A-Z", argv[-1])
        self.assertEqual("/tmp", mock_run.call_args.kwargs["cwd"])

    @posix_only
    def test_lexer_uses_subordinate_shell(self):
        result = lexer.tokenize("echo $(echo foo) bar=`echo 200`cm", expand_substitution=True)
        self.assertEqual(["echo", "foo", "bar=200cm"], result.words)

    @posix_only
    def test_lexer_reports_failure(self):
        with self.assertRaises(SubstitutionFailed):
            lexer.tokenize("echo $(exit 1)", expand_substitution=True)


if __name__ == "__main__":
    unittest.main()
