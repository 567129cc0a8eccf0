"""
Module containing the :class:`~solvefield.pipeline.SolveFieldPipeline`, which
sequences the stages applied to every input of a batch.

Each input passes through the following stages, in order:

* :class:`~solvefield.processors.ExistingOutputResolver`
* :class:`~solvefield.processors.Downloader`
* :class:`~solvefield.processors.Classifier`
* :class:`~solvefield.processors.AugmentXylist`
* :class:`~solvefield.processors.Backend`

If the field solved, it then passes through the
:class:`~solvefield.processors.FieldReporter` and, if plotting is enabled, the
plotting stages.

A :class:`~solvefield.errors.SkipInputError` abandons the current input only.
Any :class:`~solvefield.errors.FatalError` aborts the whole batch. Temporary files
are deleted in every case.
"""
import logging
from collections.abc import Sized
from typing import Iterable, Optional

from solvefield.config import BackendArgs, SolveFieldConfig
from solvefield.errors import ErrorReport, ErrorStack, FatalError, SkipInputError
from solvefield.job import JobContext, JobResult, JobStatus
from solvefield.paths import OutputRole
from solvefield.processors import (
    AugmentXylist,
    Backend,
    BaseStage,
    Classifier,
    ConstellationPlotter,
    Downloader,
    ExistingOutputResolver,
    FieldReporter,
    IndexOverlayPlotter,
    PlottingDegradedError,
    SourceOverlayPlotter,
)
from solvefield.processors.backend import BACKEND_EXECUTABLE
from solvefield.processors.base_processor import Executor
from solvefield.utils import execute, find_executable

logger = logging.getLogger(__name__)


class SolveFieldPipeline:
    """
    Class to solve a batch of inputs, one at a time
    """

    def __init__(self, config: SolveFieldConfig, executor: Optional[Executor] = None):
        if executor is None:
            executor = execute

        self.config = config
        self.executor = executor
        self.make_plots = config.make_plots

        backend_path = find_executable(BACKEND_EXECUTABLE, bin_dir=config.bin_dir)
        self.backend_args = BackendArgs.from_config(backend_path, config)

        self.preparation_stages: list[BaseStage] = [
            ExistingOutputResolver(config, executor),
            Downloader(config, executor),
            Classifier(config, executor),
            AugmentXylist(config, executor),
            Backend(config, executor),
        ]
        self.reporter = FieldReporter(config, executor)
        self.plotters: list[BaseStage] = [
            SourceOverlayPlotter(config, executor),
            IndexOverlayPlotter(config, executor),
            ConstellationPlotter(config, executor),
        ]

    def make_directories(self):
        """
        Create the output directory, if one was configured, and the directory
        for temporary files

        :return: None
        """
        directories = [self.config.temp_dir]
        if self.config.output_dir is not None:
            directories.insert(0, self.config.output_dir)

        for directory in directories:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as err:
                msg = f"Failed to create directory {directory}"
                logger.error(msg)
                raise FatalError(msg) from err

    def plot(self, job: JobContext):
        """
        Run the plotting stages for a solved input

        :param job: per-input state
        :return: None
        """
        for plotter in self.plotters:
            if not self.make_plots:
                return
            try:
                plotter.apply(job)
            except PlottingDegradedError:
                logger.warning("Disabling plotting for the remaining input files.")
                self.make_plots = False

    def process_input(
        self, infile: str, index: int, err_stack: Optional[ErrorStack] = None
    ) -> JobResult:
        """
        Process a single input

        :param infile: input reference (path or URL)
        :param index: 1-based position of the input in the batch
        :param err_stack: ErrorStack to record skips in
        :return: JobResult
        """
        if err_stack is None:
            err_stack = ErrorStack()

        job = JobContext(
            infile,
            index=index,
            config=self.config,
            backend_args=self.backend_args.reset(),
        )

        try:
            for stage in self.preparation_stages:
                try:
                    stage.apply(job)
                except SkipInputError as err:
                    err_stack.add_report(ErrorReport(err, stage.base_key, [infile]))
                    return JobResult(infile, JobStatus.SKIPPED, outputs=job.outputs)

            if not job[OutputRole.SOLVED].exists():
                logger.info(f"Field '{infile}' did not solve.")
                return JobResult(infile, JobStatus.UNSOLVED, outputs=job.outputs)

            self.reporter.apply(job)

            if self.make_plots:
                self.plot(job)

            return JobResult(infile, JobStatus.SOLVED, outputs=job.outputs)

        finally:
            job.cleanup()

    def process_inputs(
        self, inputs: Iterable[str]
    ) -> tuple[list[JobResult], ErrorStack]:
        """
        Function to process a batch of inputs, strictly in order.

        :param inputs: input references (paths or URLs)
        :return: result for each input, and the skips which were caught
        """
        self.make_directories()

        n_inputs = len(inputs) if isinstance(inputs, Sized) else None

        err_stack = ErrorStack()
        results = []

        for index, infile in enumerate(inputs, start=1):
            if n_inputs is not None:
                logger.info(f"Reading input file {index} of {n_inputs}: '{infile}'...")
            else:
                logger.info(f"Reading input file '{infile}'...")

            result = self.process_input(infile, index=index, err_stack=err_stack)
            results.append(result)

        n_solved = len([x for x in results if x.status == JobStatus.SOLVED])
        logger.info(
            f"Processed {len(results)} input files, of which {n_solved} solved "
            f"and {len(err_stack)} were skipped."
        )

        return results, err_stack
