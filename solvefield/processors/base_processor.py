"""
Module containing the :class:`~solvefield.processors.base_processor.BaseStage`
"""
import logging
from pathlib import Path
from typing import Callable

from solvefield.config import SolveFieldConfig
from solvefield.errors import CommandCancelledError, CommandFailedError
from solvefield.job import JobContext
from solvefield.utils import CommandLine, ExecutionOutcome, execute, find_executable

logger = logging.getLogger(__name__)

Executor = Callable[..., ExecutionOutcome]


class BaseStage:
    """
    Base stage class, to be inherited from for every step applied to an input
    """

    @property
    def base_key(self):
        """
        Unique key for the stage, used when reporting errors

        :return: key
        """
        raise NotImplementedError

    def __init__(self, config: SolveFieldConfig, executor: Executor = execute):
        self.config = config
        self.executor = executor

    def get_executable(self, name: str) -> Path:
        """
        Find one of the external programs used by the stage

        :param name: program name
        :return: path
        """
        return find_executable(name, bin_dir=self.config.bin_dir)

    def run_command(
        self,
        command_line: CommandLine,
        description: str,
        capture_output: bool = False,
    ) -> ExecutionOutcome:
        """
        Run a command line, raising an error if it fails

        :param command_line: command line to run
        :param description: short description of the command for error messages
        :param capture_output: boolean whether to capture output
        :return: ExecutionOutcome
        """
        outcome = self.run_command_unchecked(
            command_line, capture_output=capture_output
        )
        if not outcome.ok:
            raise self.command_error(command_line, outcome, description)
        return outcome

    def run_command_unchecked(
        self, command_line: CommandLine, capture_output: bool = False
    ) -> ExecutionOutcome:
        """
        Run a command line, returning the outcome however the command ended

        :param command_line: command line to run
        :param capture_output: boolean whether to capture output
        :return: ExecutionOutcome
        """
        logger.debug(f"Running:\n  {command_line}")
        return self.executor(command_line, capture_output=capture_output)

    @staticmethod
    def command_error(
        command_line: CommandLine, outcome: ExecutionOutcome, description: str
    ) -> CommandFailedError:
        """
        Build the error for a failed command

        :param command_line: command line which failed
        :param outcome: outcome of the command
        :param description: short description of the command
        :return: error to raise
        """
        cmd = command_line.render()
        if outcome.cancelled:
            return CommandCancelledError(
                f"{description} was cancelled. Command was:\n  {cmd}",
                cmd=cmd,
                outcome=outcome,
            )
        return CommandFailedError(
            f"{description} failed with exit status {outcome.returncode}. "
            f"Command that failed was:\n  {cmd}",
            cmd=cmd,
            outcome=outcome,
        )

    def apply(self, job: JobContext):
        """
        Apply the stage to an input

        :param job: per-input state
        :return: None
        """
        raise NotImplementedError

    def __str__(self) -> str:
        return f"Stage '{self.base_key}'"
