"""
External test command execution.

Runs the project's test command (``make test TEST_VERBOSE=1`` by default)
from the project root with the resolved test scripts passed as a single
space-joined variable, or formats the equivalent shell command line for
printing. The command's exit status becomes the tool's exit status.

Test scripts with spaces in their names cannot be represented, since the
list is interpolated into a single space-delimited variable.
"""

import logging
import re
import subprocess
from collections.abc import Sequence
from pathlib import Path

import click

from ...config.models import RunnerConfig
from ...domain.models import InvocationError

logger = logging.getLogger(__name__)

# Arguments made only of these characters are printed unquoted.
_NEEDS_QUOTING = re.compile(r"[^\w./=-]")


def shell_quote(arg: str) -> str:
    """Quote ``arg`` for a POSIX shell when it holds anything outside the safe set."""
    if arg and not _NEEDS_QUOTING.search(arg):
        return arg
    return "'" + arg.replace("'", "'\\''") + "'"


class MakeTestRunner:
    """Invoke the external test command for a list of test scripts."""

    def __init__(self, config: RunnerConfig | None = None) -> None:
        self.config = config or RunnerConfig()

    def build_command(self, test_scripts: Sequence[str]) -> list[str]:
        """Full command line: the configured command plus ``TEST_FILES=...``."""
        files = " ".join(test_scripts)
        return [*self.config.command, f"{self.config.files_variable}={files}"]

    def format_command(self, cmd: Sequence[str]) -> str:
        """Render ``cmd`` as a shell command line."""
        return " ".join(shell_quote(arg) for arg in cmd)

    def print_command(self, test_scripts: Sequence[str]) -> None:
        """Print the command line that ``run`` would execute."""
        click.echo(self.format_command(self.build_command(test_scripts)))

    def run(self, test_scripts: Sequence[str], cwd: str | Path) -> int:
        """
        Run the test command from ``cwd`` and wait for it.

        Args:
            test_scripts: Resolved test scripts, relative to ``cwd``
            cwd: Project root to run in

        Returns:
            The command's exit status (128 + signal number if it was killed)

        Raises:
            InvocationError: If the command cannot be started or ``cwd``
                cannot be entered
        """
        cmd = self.build_command(test_scripts)
        logger.debug(f"Running: {self.format_command(cmd)} (in {cwd})")

        try:
            result = subprocess.run(cmd, cwd=str(cwd))
        except OSError as e:
            logger.error(f"Failed to run {cmd[0]}: {e}")
            raise InvocationError(cmd, e) from e

        if result.returncode < 0:
            return 128 - result.returncode
        return result.returncode
