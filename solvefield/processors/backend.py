"""
Module containing a stage to run the solver backend
"""
import logging

from solvefield.job import JobContext
from solvefield.paths import OutputRole
from solvefield.processors.base_processor import BaseStage
from solvefield.utils import CommandLine, ProcessSpec

logger = logging.getLogger(__name__)

BACKEND_EXECUTABLE = "backend"


class Backend(BaseStage):
    """
    Stage to solve the canonical coordinate list of an input. The backend
    writes the solved/wcs/match/rdls outputs as side effects.
    """

    base_key = "solve"

    def __str__(self) -> str:
        return "Stage to solve a field with the astrometry backend."

    def get_command(self, job: JobContext) -> CommandLine:
        """
        Build the backend command from the per-input argument list

        :param job: per-input state
        :return: CommandLine
        """
        job.backend_args.append(str(job[OutputRole.AXY]))
        program, *args = job.backend_args
        return CommandLine(ProcessSpec(program, args))

    def apply(self, job: JobContext):
        command_line = self.get_command(job)

        logger.info("Solving...")
        outcome = self.run_command(
            command_line, description="backend", capture_output=True
        )
        for line in outcome.lines or []:
            logger.debug(f"  {line}")
