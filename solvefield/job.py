"""
Module containing the per-input state carried through the pipeline
"""
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Optional

from solvefield.config import SolveFieldConfig
from solvefield.errors import FatalError
from solvefield.paths import (
    OutputFileSet,
    OutputRole,
    get_output_files,
    get_solved_in_path,
)

logger = logging.getLogger(__name__)


class JobStatus(Enum):
    """
    Final outcome of a single input
    """

    SOLVED = "solved"
    UNSOLVED = "unsolved"
    SKIPPED = "skipped"


class JobContext:
    """
    Mutable state for one input. Created at the start of an iteration and
    discarded after cleanup.
    """

    def __init__(
        self,
        infile: str,
        index: int,
        config: SolveFieldConfig,
        backend_args: Optional[list[str]] = None,
    ):
        self.raw_infile = infile
        self.infile = infile
        self.index = index
        self.config = config

        self.outputs: OutputFileSet = get_output_files(
            infile,
            index=index,
            output_dir=config.output_dir,
            template=config.base_name_template,
        )
        self.solved_in: Optional[Path] = get_solved_in_path(
            self.base, solved_in=config.solved_in, solved_in_dir=config.solved_in_dir
        )

        self.temp_files: list[Path] = []
        self.backend_args = list(backend_args) if backend_args is not None else []

        self.is_xylist: Optional[bool] = None
        self.xylist_path: Optional[Path] = None
        self.image_path: Optional[Path] = None
        self.pnm_path: Optional[Path] = None

    @property
    def base(self) -> str:
        """Base name shared by all outputs"""
        return self.outputs.base

    @property
    def suffix(self) -> Optional[str]:
        """Suffix trimmed from the input name, if any"""
        return self.outputs.suffix

    def __getitem__(self, role: OutputRole) -> Path:
        return self.outputs[role]

    def new_temp_file(self, suffix: str) -> Path:
        """
        Create an empty temporary file, which will be deleted at cleanup

        :param suffix: file suffix, e.g. '.ppm'
        :return: path of temporary file
        """
        try:
            handle, name = tempfile.mkstemp(
                suffix=suffix, prefix="tmp.", dir=self.config.temp_dir
            )
        except OSError as err:
            msg = f"Failed to create temporary file in {self.config.temp_dir}: {err}"
            logger.error(msg)
            raise FatalError(msg) from err
        os.close(handle)
        temp_path = Path(name)
        self.temp_files.append(temp_path)
        logger.debug(f"Created temporary file {temp_path}")
        return temp_path

    def cleanup(self):
        """
        Delete all temporary files, and drain the per-input collections

        :return: None
        """
        for temp_file in self.temp_files:
            try:
                temp_file.unlink(missing_ok=True)
                logger.debug(f"Deleted temporary file {temp_file}")
            except OSError as err:
                logger.error(f"Failed to delete temp file '{temp_file}': {err}")
        self.temp_files = []
        self.backend_args = []


class JobResult:
    """
    Summary of how one input ended
    """

    def __init__(
        self,
        infile: str,
        status: JobStatus,
        outputs: Optional[OutputFileSet] = None,
    ):
        self.infile = infile
        self.status = status
        self.outputs = outputs

    def __repr__(self) -> str:
        return f"JobResult({self.infile!r}, {self.status.value})"
