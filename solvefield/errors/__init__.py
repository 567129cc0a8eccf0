"""
Central module for handling errors during processing.

In general, the philosophy is that every input is processed, unless an error
occurs. Errors come in exactly two severities:

* **fatal errors**, which abort the whole batch immediately, and
* **skips**, which abandon a single input and move on to the next one.

Each skip is recorded as an :class:`~solvefield.errors.error_report.ErrorReport`.
These reports are collated in a single
:class:`~solvefield.errors.error_stack.ErrorStack` object, which can then be used
to summarise which inputs were skipped and why.

.. include:: ../../solvefield/errors/exceptions.py
    :start-line: 3
    :end-line: 14

"""
from solvefield.errors.error_report import ErrorReport
from solvefield.errors.error_stack import ErrorStack
from solvefield.errors.exceptions import (
    AlreadySolvedError,
    BaseSolveFieldError,
    CommandCancelledError,
    CommandFailedError,
    ExecutableNotFoundError,
    FatalError,
    OutputExistsError,
    SkipInputError,
)
