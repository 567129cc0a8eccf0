"""
Module containing a stage to report on a solved field
"""
import logging

from solvefield.errors import FatalError
from solvefield.io import FieldSummary, project_rdls_to_xyls, read_field_summary
from solvefield.job import JobContext
from solvefield.paths import OutputRole
from solvefield.processors.base_processor import BaseStage

logger = logging.getLogger(__name__)


class FieldReporter(BaseStage):
    """
    Stage to project the index stars into the field, and log the field center
    and size
    """

    base_key = "report"

    def __str__(self) -> str:
        return "Stage to summarise the world-coordinate solution of a field."

    def project_index_stars(self, job: JobContext):
        """
        Write the index stars' pixel positions to the -indx.xyls file

        :param job: per-input state
        :return: None
        """
        try:
            project_rdls_to_xyls(
                wcs_path=job[OutputRole.WCS],
                rdls_path=job[OutputRole.RDLS],
                output_path=job[OutputRole.INDEX_XYLS],
            )
        except (OSError, KeyError, ValueError) as err:
            msg = (
                "Failed to project index stars into field coordinates "
                f"using {job[OutputRole.WCS]}: {err}"
            )
            logger.error(msg)
            raise FatalError(msg) from err

    def summarise_field(self, job: JobContext) -> FieldSummary:
        """
        Read the WCS header and log the field center and size

        :param job: per-input state
        :return: FieldSummary
        """
        try:
            summary = read_field_summary(job[OutputRole.WCS])
        except (OSError, KeyError, ValueError) as err:
            msg = f"Failed to read WCS header from file {job[OutputRole.WCS]}: {err}"
            logger.error(msg)
            raise FatalError(msg) from err

        logger.info(
            f"Field center: (RA,Dec) = ({summary.ra_deg:.4g}, "
            f"{summary.dec_deg:.4g}) deg."
        )
        logger.info(
            f"Field center: (RA H:M:S, Dec D:M:S) = ({summary.ra_hms}, "
            f"{summary.dec_dms})."
        )
        logger.info(
            f"Field size: {summary.width:g} x {summary.height:g} {summary.units}"
        )
        return summary

    def apply(self, job: JobContext):
        self.project_index_stars(job)
        self.summarise_field(job)
