"""
Module containing a stage to deal with outputs left over from earlier runs
"""
import logging

from solvefield.errors import AlreadySolvedError, FatalError, OutputExistsError
from solvefield.job import JobContext
from solvefield.paths import OutputRole
from solvefield.processors.base_processor import BaseStage

logger = logging.getLogger(__name__)


class ExistingOutputResolver(BaseStage):
    """
    Stage to skip solved inputs, and to delete or keep existing output files
    according to the overwrite/continue policy
    """

    base_key = "existing-outputs"

    def __str__(self) -> str:
        return "Stage to check for existing output files."

    def check_solved(self, job: JobContext):
        """
        Skip the input if a solved file already exists

        :param job: per-input state
        :return: None
        """
        to_check = [job.solved_in, job[OutputRole.SOLVED]]
        for solved_path in [x for x in to_check if x is not None]:
            logger.debug(f"Checking for solved file {solved_path}")
            if solved_path.exists():
                msg = f"Solved file exists: {solved_path}; skipping this input file."
                logger.info(msg)
                raise AlreadySolvedError(msg)

    def apply(self, job: JobContext):
        if (job.solved_in is not None) and (job.solved_in == job[OutputRole.SOLVED]):
            # The solved file is an input here, so must not be deleted
            job.outputs.exclude(OutputRole.SOLVED)

        if self.config.skip_solved:
            self.check_solved(job)

        for path in job.outputs:
            if not path.exists():
                continue

            if self.config.continue_run:
                logger.debug(f"Keeping existing output file {path}")

            elif self.config.overwrite:
                try:
                    path.unlink()
                except OSError as err:
                    msg = f"Failed to delete an already-existing output file '{path}'"
                    logger.error(msg)
                    raise FatalError(msg) from err
                logger.debug(f"Deleted existing output file {path}")

            else:
                msg = (
                    f"Output file '{path}' already exists. "
                    f"Use the --overwrite flag to overwrite existing files, "
                    f"or the --continue flag to not overwrite existing files "
                    f"but still try solving."
                )
                logger.info(msg)
                logger.info("Continuing to next input file.")
                raise OutputExistsError(msg)
