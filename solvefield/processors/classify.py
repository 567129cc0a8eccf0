"""
Module containing a stage to decide whether an input is an image or a
coordinate list
"""
import logging
from pathlib import Path

from solvefield.io import is_xylist
from solvefield.job import JobContext
from solvefield.processors.base_processor import BaseStage

logger = logging.getLogger(__name__)


class Classifier(BaseStage):
    """
    Stage to route an input down the image or coordinate-list branch
    """

    base_key = "classify"

    def __str__(self) -> str:
        return "Stage to check whether an input is an image or coordinate list."

    def apply(self, job: JobContext):
        logger.debug(f"Checking if file '{job.infile}' is xylist or image")

        job.is_xylist, reason = is_xylist(
            job.infile, x_column=self.config.x_column, y_column=self.config.y_column
        )

        if job.is_xylist:
            logger.debug("  xyls")
            job.xylist_path = Path(job.infile)
        else:
            logger.debug(f"  image (not xyls because: {reason})")
            job.image_path = Path(job.infile)
            job.pnm_path = job.new_temp_file(".ppm")
