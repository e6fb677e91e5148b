"""Tests for building, printing and running the external test command."""

import subprocess
from unittest.mock import patch

import pytest

from testscope.adapters.io.make_runner import MakeTestRunner, shell_quote
from testscope.config.models import RunnerConfig
from testscope.domain.models import InvocationError

RUN = "testscope.adapters.io.make_runner.subprocess.run"


class TestShellQuote:
    """Test quoting of printed command arguments."""

    @pytest.mark.parametrize("arg", ["make", "TEST_VERBOSE=1", "t/foo.t", "a-b.c"])
    def test_safe_arguments_are_unquoted(self, arg):
        assert shell_quote(arg) == arg

    def test_spaces_are_quoted(self):
        assert shell_quote("TEST_FILES=t/a.t t/b.t") == "'TEST_FILES=t/a.t t/b.t'"

    def test_single_quote_is_escaped(self):
        assert shell_quote("it's") == "'it'\\''s'"

    def test_empty_argument(self):
        assert shell_quote("") == "''"

    def test_shell_metacharacters(self):
        assert shell_quote("$HOME") == "'$HOME'"
        assert shell_quote("a\\b") == "'a\\b'"


class TestMakeTestRunner:
    """Test MakeTestRunner."""

    @pytest.fixture
    def runner(self):
        return MakeTestRunner()

    def test_build_command(self, runner):
        assert runner.build_command(["t/bar.t", "t/foo.t"]) == [
            "make",
            "test",
            "TEST_VERBOSE=1",
            "TEST_FILES=t/bar.t t/foo.t",
        ]

    def test_build_command_single_script(self, runner):
        assert runner.build_command(["t/foo.t"])[-1] == "TEST_FILES=t/foo.t"

    def test_format_command(self, runner):
        cmd = runner.build_command(["t/bar.t", "t/baz.t", "t/foo.t"])

        assert (
            runner.format_command(cmd)
            == "make test TEST_VERBOSE=1 'TEST_FILES=t/bar.t t/baz.t t/foo.t'"
        )

    def test_format_single_script_needs_no_quotes(self, runner):
        cmd = runner.build_command(["t/foo.t"])

        assert runner.format_command(cmd) == "make test TEST_VERBOSE=1 TEST_FILES=t/foo.t"

    def test_print_command(self, runner, capsys):
        runner.print_command(["t/it's.t"])

        assert capsys.readouterr().out == "make test TEST_VERBOSE=1 'TEST_FILES=t/it'\\''s.t'\n"

    def test_custom_command(self):
        runner = MakeTestRunner(RunnerConfig(command=["prove", "-lv"], files_variable="FILES"))

        assert runner.build_command(["t/a.t"]) == ["prove", "-lv", "FILES=t/a.t"]

    def test_run_passes_exit_status(self, runner, tmp_path):
        with patch(RUN, return_value=subprocess.CompletedProcess([], 2)) as run:
            assert runner.run(["t/foo.t"], tmp_path) == 2

        run.assert_called_once_with(
            ["make", "test", "TEST_VERBOSE=1", "TEST_FILES=t/foo.t"], cwd=str(tmp_path)
        )

    def test_run_success(self, runner, tmp_path):
        with patch(RUN, return_value=subprocess.CompletedProcess([], 0)):
            assert runner.run(["t/foo.t"], tmp_path) == 0

    def test_killed_by_signal(self, runner, tmp_path):
        with patch(RUN, return_value=subprocess.CompletedProcess([], -15)):
            assert runner.run(["t/foo.t"], tmp_path) == 143

    def test_missing_executable(self, tmp_path):
        runner = MakeTestRunner(RunnerConfig(command=["no-such-make-binary"]))

        with patch(RUN, side_effect=FileNotFoundError(2, "No such file or directory")):
            with pytest.raises(InvocationError) as exc_info:
                runner.run(["t/foo.t"], tmp_path)

        message = str(exc_info.value)
        assert message.startswith("No such file or directory: no-such-make-binary")
        assert exc_info.value.command[0] == "no-such-make-binary"
