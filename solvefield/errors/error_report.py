"""
Module for ErrorReport objects.

An :class:`~solvefield.errors.error_report.ErrorReport` object summarises a single
error which caused one input to be skipped.
"""
import logging
import traceback
from datetime import datetime

from solvefield.errors.exceptions import SkipInputError

logger = logging.getLogger(__name__)


class ErrorReport:
    """
    Class representing a single skip raised during processing
    """

    def __init__(self, error: SkipInputError, stage_name: str, contents: list[str]):
        self.error = error
        self.stage_name = stage_name
        self.contents = contents
        self.t_error = datetime.now()

    def generate_full_traceback(self) -> str:
        """
        Returns a verbose string summarising the error

        :return: String
        """
        msg = (
            f"Error for stage {self.stage_name} at {self.t_error} "
            f"(local time): \n "
            f"{''.join(traceback.format_tb(self.error.__traceback__))}"
            f"{self.get_error_name()}: {self.error} \n  "
            f"This error affected the following inputs: {self.contents} \n \n"
        )
        return msg

    def get_error_name(self) -> str:
        """
        Returns the name of the error

        :return: Name
        """
        return type(self.error).__name__

    def get_error_message(self) -> str:
        """
        Returns the message of the error, or its name if it has none

        :return: String for single line
        """
        msg = str(self.error)
        if msg == "":
            msg = self.get_error_name()
        return msg

    def get_error_line(self) -> str:
        """
        Returns only the first line of the error message

        :return: string
        """
        return self.get_error_message().split("\n")[0]
