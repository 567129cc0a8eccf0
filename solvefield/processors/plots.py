"""
Module containing stages to plot a solved field.

Each plotting stage has an entry in the configured failure policy table. A failed
plot either aborts the batch, or disables plotting for the rest of the batch.
A cancelled plot always aborts the batch.
"""
import logging
from pathlib import Path

from solvefield.config import (
    CONSTELLATIONS_STAGE,
    INDEX_OVERLAY_STAGE,
    SOURCE_OVERLAY_STAGE,
    FailurePolicy,
)
from solvefield.errors import BaseSolveFieldError, FatalError
from solvefield.io import read_first_match
from solvefield.job import JobContext
from solvefield.paths import OutputRole
from solvefield.processors.base_processor import BaseStage
from solvefield.utils import CommandLine, ExecutionOutcome, ProcessSpec

logger = logging.getLogger(__name__)

PLOTXY_EXECUTABLE = "plotxy"
PLOTQUAD_EXECUTABLE = "plotquad"
CONSTELLATIONS_EXECUTABLE = "plot-constellations"


class PlottingDegradedError(BaseSolveFieldError):
    """
    Raised when a plot failed, and plotting should be switched off
    """


class BasePlotter(BaseStage):
    """
    Base class for plotting stages
    """

    base_key = "plot"

    def __str__(self) -> str:
        return "Stage to plot a solved field."

    @property
    def failure_policy(self) -> FailurePolicy:
        """
        What to do if this plot fails

        :return: policy
        """
        return self.config.plot_failure_policy[self.base_key]

    def plotxy(self, xylist_path: Path, pnm_path: Path | None = None) -> ProcessSpec:
        """
        Start a plotxy invocation for a coordinate list, optionally drawn over a
        background image

        :param xylist_path: coordinate list to plot
        :param pnm_path: optional background image
        :return: ProcessSpec
        """
        process = ProcessSpec(self.get_executable(PLOTXY_EXECUTABLE))
        process.add("-i", xylist_path)
        if pnm_path is not None:
            process.add("-I", pnm_path)
        return process

    def add_columns(self, process: ProcessSpec):
        """
        Add the configured column names to a plotxy invocation

        :param process: plotxy invocation
        :return: None
        """
        if self.config.x_column is not None:
            process.add("-X", self.config.x_column)
        if self.config.y_column is not None:
            process.add("-Y", self.config.y_column)

    def check_outcome(
        self, command_line: CommandLine, outcome: ExecutionOutcome, description: str
    ):
        """
        Apply the failure policy to the outcome of a plotting command

        :param command_line: command which was run
        :param outcome: outcome of the command
        :param description: short description of the command
        :return: None
        """
        if outcome.ok:
            return

        err = self.command_error(command_line, outcome, description)
        if outcome.cancelled or (self.failure_policy == FailurePolicy.ABORT):
            logger.error(f"{err} Exiting.")
            raise err

        logger.error(str(err))
        logger.info("Maybe you didn't build the plotting programs?")
        raise PlottingDegradedError(str(err)) from err

    def run_plot(
        self, command_line: CommandLine, description: str, capture_output=False
    ) -> ExecutionOutcome:
        """
        Run a plotting command and apply the failure policy

        :param command_line: command to run
        :param description: short description of the command
        :param capture_output: boolean whether to capture output
        :return: ExecutionOutcome
        """
        outcome = self.run_command_unchecked(
            command_line, capture_output=capture_output
        )
        self.check_outcome(command_line, outcome, description)
        return outcome


class SourceOverlayPlotter(BasePlotter):
    """
    Stage to plot the extracted sources, over the image if there is one
    """

    base_key = SOURCE_OVERLAY_STAGE

    def get_command(self, job: JobContext) -> CommandLine:
        """
        Build the source overlay command

        :param job: per-input state
        :return: CommandLine
        """
        background = self.plotxy(job[OutputRole.AXY], pnm_path=job.pnm_path)
        self.add_columns(background)
        background.add("-P", "-C", "red", "-w", 2, "-N", 50, "-x", 1, "-y", 1)

        overlay = self.plotxy(job[OutputRole.AXY])
        self.add_columns(overlay)
        overlay.add("-I", "-", "-w", 2, "-r", 3, "-C", "red", "-n", 50, "-N", 200)
        overlay.add("-x", 1, "-y", 1)

        return (
            CommandLine(background)
            .pipe(overlay)
            .redirect(job[OutputRole.OBJS_PLOT])
        )

    def apply(self, job: JobContext):
        self.run_plot(self.get_command(job), description="Plotting command")


class IndexOverlayPlotter(BasePlotter):
    """
    Stage to plot the extracted sources, the projected index stars and the first
    matched quad
    """

    base_key = INDEX_OVERLAY_STAGE

    def get_quad(self, job: JobContext) -> ProcessSpec:
        """
        Build the plotquad invocation for the first match in the match file

        :param job: per-input state
        :return: ProcessSpec
        """
        try:
            match = read_first_match(job[OutputRole.MATCH])
        except (OSError, KeyError, ValueError) as err:
            msg = f"Failed to read a match from matchfile {job[OutputRole.MATCH]}"
            logger.error(msg)
            raise FatalError(msg) from err

        quad = ProcessSpec(self.get_executable(PLOTQUAD_EXECUTABLE))
        quad.add("-I", "-", "-C", "green", "-w", 2, "-d", match.dimquads)
        quad.add(*[f"{x:g}" for x in match.quadpix])
        return quad

    def get_command(self, job: JobContext) -> CommandLine:
        """
        Build the index overlay command

        :param job: per-input state
        :return: CommandLine
        """
        sources = self.plotxy(job[OutputRole.AXY], pnm_path=job.pnm_path)
        self.add_columns(sources)
        sources.add("-P", "-C", "red", "-w", 2, "-r", 6, "-N", 200, "-x", 1, "-y", 1)

        index = self.plotxy(job[OutputRole.INDEX_XYLS])
        index.add("-I", "-", "-w", 2, "-r", 4, "-C", "green", "-x", 1, "-y", 1, "-P")

        return (
            CommandLine(sources)
            .pipe(index)
            .pipe(self.get_quad(job))
            .redirect(job[OutputRole.INDEX_PLOT])
        )

    def apply(self, job: JobContext):
        self.run_plot(self.get_command(job), description="Plotting commands")


class ConstellationPlotter(BasePlotter):
    """
    Stage to label the constellations and bright objects in an image
    """

    base_key = CONSTELLATIONS_STAGE

    def get_command(self, job: JobContext) -> CommandLine:
        """
        Build the plot-constellations command

        :param job: per-input state
        :return: CommandLine
        """
        process = ProcessSpec(self.get_executable(CONSTELLATIONS_EXECUTABLE))
        if self.config.verbose:
            process.add("-v")
        process.add("-w", job[OutputRole.WCS], "-i", job.pnm_path)
        process.add("-N", "-C", "-o", job[OutputRole.NGC_PLOT])
        return CommandLine(process)

    def apply(self, job: JobContext):
        if job.image_path is None:
            return

        outcome = self.run_plot(
            self.get_command(job),
            description="plot-constellations",
            capture_output=True,
        )

        if outcome.lines:
            logger.info("Your field contains:")
            for line in outcome.lines:
                logger.info(f"  {line}")
