"""
Module for executing bash commands
"""
import logging
import os
import shlex
import shutil
import signal
import subprocess
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

from solvefield.errors import ExecutableNotFoundError, FatalError

logger = logging.getLogger(__name__)

CANCEL_SIGNAL = signal.SIGTERM


class ExecutionError(FatalError):
    """Error relating to executing bash command"""


class Connector(Enum):
    """
    Shell tokens joining the elements of a command line
    """

    PIPE = "|"
    REDIRECT = ">"


class ProcessSpec:
    """
    A single program invocation: the program plus its (unquoted) arguments
    """

    def __init__(self, program: str | Path, args: Optional[list] = None):
        self.program = str(program)
        self.args = [str(x) for x in args] if args is not None else []

    def add(self, *args):
        """
        Append arguments to the invocation

        :param args: arguments
        :return: self
        """
        self.args += [str(x) for x in args]
        return self

    @property
    def argv(self) -> list[str]:
        """
        Full argument vector, including the program

        :return: list of strings
        """
        return [self.program] + self.args

    def render(self) -> str:
        """
        Shell-quoted representation of the invocation

        :return: string
        """
        return shlex.join(self.argv)

    def __repr__(self) -> str:
        return f"ProcessSpec({self.render()})"


class CommandLine:
    """
    One or more :class:`ProcessSpec` objects chained by pipes, with an optional
    redirect of the final output to a file.

    Arguments are only quoted when the command line is rendered, immediately
    before execution.
    """

    def __init__(self, process: ProcessSpec):
        self.processes = [process]
        self.output_path: Optional[Path] = None

    def pipe(self, process: ProcessSpec):
        """
        Pipe the output of the chain so far into another process

        :param process: next process
        :return: self
        """
        if self.output_path is not None:
            raise ValueError("Cannot pipe after output has been redirected")
        self.processes.append(process)
        return self

    def redirect(self, output_path: str | Path):
        """
        Redirect the output of the final process to a file

        :param output_path: file to write
        :return: self
        """
        self.output_path = Path(output_path)
        return self

    @property
    def programs(self) -> list[str]:
        """
        Names of the programs in the chain, without their directories

        :return: list of names
        """
        return [Path(x.program).name for x in self.processes]

    def render(self) -> str:
        """
        Materialise the command line as a single shell string

        :return: string
        """
        cmd = f" {Connector.PIPE.value} ".join(x.render() for x in self.processes)
        if self.output_path is not None:
            cmd += f" {Connector.REDIRECT.value} {shlex.quote(str(self.output_path))}"
        return cmd

    def __str__(self) -> str:
        return self.render()


class ExecutionOutcome:
    """
    Result of running a command line
    """

    def __init__(
        self,
        returncode: int,
        cancelled: bool = False,
        lines: Optional[list[str]] = None,
    ):
        self.returncode = returncode
        self.cancelled = cancelled
        self.lines = lines

    @property
    def ok(self) -> bool:
        """
        Whether the command exited normally with status zero

        :return: boolean
        """
        return (self.returncode == 0) & (not self.cancelled)

    def __repr__(self) -> str:
        return (
            f"ExecutionOutcome(returncode={self.returncode}, "
            f"cancelled={self.cancelled})"
        )


def run_local(cmd: str, capture_output: bool = False) -> ExecutionOutcome:
    """
    Function to run a command on the local machine via the shell, blocking until
    it exits.

    Parameters
    ----------
    cmd: A string containing the command you want to run.
    An example would be:
        cmd = 'plotxy -i field.axy | plotquad -I - > field.png'
    capture_output: Whether to capture the output rather than streaming it to the
    terminal. Captured stdout is returned split into lines.

    Returns
    -------
    ExecutionOutcome
    """
    logger.debug(f"Running: {cmd}")

    sys.stdout.flush()
    sys.stderr.flush()

    try:
        rval = subprocess.run(
            cmd, shell=True, check=False, capture_output=capture_output
        )
    except OSError as err:
        msg = f"Failed to run command '{cmd}'"
        logger.error(msg)
        raise ExecutionError(msg) from err

    lines = None
    if capture_output:
        lines = rval.stdout.decode(errors="replace").splitlines()
        stderr = rval.stderr.decode(errors="replace")
        if stderr != "":
            logger.debug(f"Found the following error output: {stderr}")

    returncode = rval.returncode
    cancelled = returncode == -CANCEL_SIGNAL

    if returncode < 0:
        logger.error(f"Command was killed by signal {-returncode}")
    elif returncode != 0:
        logger.error(f"Command exited with exit status {returncode}")

    return ExecutionOutcome(returncode, cancelled=cancelled, lines=lines)


def execute(command_line: CommandLine, capture_output: bool = False):
    """
    Render a command line and execute it via bash

    :param command_line: CommandLine to run
    :param capture_output: boolean whether to capture output
    :return: ExecutionOutcome
    """
    return run_local(command_line.render(), capture_output=capture_output)


def find_executable(name: str, bin_dir: Optional[str | Path] = None) -> Path:
    """
    Locate an external program. Searches <bin_dir>, then the directory holding
    the running interpreter's scripts, then the PATH.

    :param name: program name
    :param bin_dir: optional directory to search first
    :return: path to the program
    """
    search_dirs = []
    if bin_dir is not None:
        search_dirs.append(Path(bin_dir))
    search_dirs.append(Path(sys.executable).parent)

    for search_dir in search_dirs:
        candidate = search_dir.joinpath(name)
        if candidate.is_file() & os.access(candidate, os.X_OK):
            return candidate

    found = shutil.which(name)
    if found is None:
        err = f"Error, couldn't find executable '{name}'"
        logger.error(err)
        raise ExecutableNotFoundError(err)

    return Path(found)
