"""
Module containing a stage to run augment-xylist, which turns any input into the
canonical coordinate list read by the backend
"""
import logging

from solvefield.job import JobContext
from solvefield.paths import OutputRole
from solvefield.processors.base_processor import BaseStage
from solvefield.utils import CommandLine, ProcessSpec

logger = logging.getLogger(__name__)

AUGMENT_EXECUTABLE = "augment-xylist"


class AugmentXylist(BaseStage):
    """Stage to run augment-xylist"""

    base_key = "augment"

    def __str__(self) -> str:
        return "Stage to prepare a canonical coordinate list with augment-xylist."

    def get_command(self, job: JobContext) -> CommandLine:
        """
        Build the augment-xylist command for an input

        :param job: per-input state
        :return: CommandLine
        """
        process = ProcessSpec(self.get_executable(AUGMENT_EXECUTABLE))

        if self.config.verbose:
            process.add("--verbose")

        process.add(
            "--out",
            job[OutputRole.AXY],
            "--match",
            job[OutputRole.MATCH],
            "--rdls",
            job[OutputRole.RDLS],
            "--solved",
            job[OutputRole.SOLVED],
            "--wcs",
            job[OutputRole.WCS],
        )

        if job.is_xylist:
            process.add("--xylist", job.xylist_path)
        else:
            process.add("--image", job.image_path)
            process.add("--pnm", job.pnm_path, "--force-ppm")

        if self.config.x_column is not None:
            process.add("--x-column", self.config.x_column)
        if self.config.y_column is not None:
            process.add("--y-column", self.config.y_column)

        if job.solved_in is not None:
            process.add("--solved-in", job.solved_in)

        if self.config.scale_low is not None:
            process.add("--scale-low", self.config.scale_low)
        if self.config.scale_high is not None:
            process.add("--scale-high", self.config.scale_high)
        if self.config.scale_units is not None:
            process.add("--scale-units", self.config.scale_units)
        if self.config.downsample is not None:
            process.add("--downsample", self.config.downsample)
        if self.config.parity is not None:
            process.add("--parity", self.config.parity)

        return CommandLine(process)

    def apply(self, job: JobContext):
        command_line = self.get_command(job)
        self.run_command(command_line, description="augment-xylist")
