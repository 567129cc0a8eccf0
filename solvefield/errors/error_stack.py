"""
Module for ErrorStack objects.

A :class:`~solvefield.errors.error_stack.ErrorStack` object will contain a list of
:class:`~solvefield.errors.error_report.ErrorReport` objects, one for each input
which was skipped during a batch. Fatal errors are never stacked, because they
abort the batch.
"""

import logging
from pathlib import Path
from typing import Optional

from solvefield.errors.error_report import ErrorReport
from solvefield.paths import PACKAGE_NAME, __version__

logger = logging.getLogger(__name__)


class ErrorStack:
    """
    Container class to hold multiple
    :class:`~solvefield.errors.error_report.ErrorReport` objects
    """

    def __init__(self, reports: Optional[list[ErrorReport]] = None):
        self.reports = []
        self.skipped_inputs = []

        if reports is not None:
            for report in reports:
                self.add_report(report)

    def add_report(self, report: ErrorReport):
        """
        Adds a new ErrorReport

        :param report: ErrorReport to add
        :return: None
        """
        self.reports.append(report)
        self.skipped_inputs = sorted(set(self.skipped_inputs + report.contents))

    def __len__(self):
        return len(self.reports)

    def summarise_error_stack(
        self, output_path: Optional[str | Path] = None, verbose: bool = True
    ) -> str:
        """
        Returns a string summary of all ErrorReports, grouped by error type.

        :param output_path: Path to write summary in .txt format (optional)
        :param verbose: boolean whether to provide a verbose summary
        :return: String summary of errors
        """
        summary = (
            f"Error report summarising {len(self.skipped_inputs)} skipped inputs. \n"
            f"Code version: {PACKAGE_NAME}=={__version__} \n \n"
        )

        if len(self.reports) > 0:
            summary += "Summarising each error: \n\n"

            error_names = [err.get_error_name() for err in self.reports]

            for error_name in sorted(set(error_names)):
                matching_errors = [
                    x for x in self.reports if x.get_error_name() == error_name
                ]

                inputs = []
                for err in matching_errors:
                    inputs += err.contents
                inputs = sorted(set(inputs))

                line = matching_errors[0].get_error_line()
                summary += (
                    f"Found {error_names.count(error_name)} counts of error "
                    f"{error_name}, affecting {len(inputs)} inputs: \n{line}\n"
                )
                if verbose:
                    summary += f"{inputs} \n"
                summary += " \n"

            if verbose:
                for report in self.reports:
                    summary += str(report.generate_full_traceback())

        else:
            msg = "No inputs were skipped during processing"
            logger.debug(msg)
            summary += f"\n {msg}"

        if output_path is not None:
            logger.info(f"Saving summary of skipped inputs to {output_path}")
            with open(output_path, "w", encoding="utf-8") as err_file:
                err_file.write(summary)

        return summary
