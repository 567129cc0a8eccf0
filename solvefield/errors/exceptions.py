"""
Module containing common exceptions or base exceptions for the code.

In general, all internal errors should inherit from the
:class:`solvefield.errors.exceptions.BaseSolveFieldError` class.

If the error is fatal (i.e the whole batch should stop), then an
error should be raised which inherits from the
:class:`solvefield.errors.exceptions.FatalError` class.

If the error only concerns a single input (so the batch should continue with
the next input), then an error should be raised which inherits from the
:class:`solvefield.errors.exceptions.SkipInputError` class. In that case,
the input is abandoned but the error will be logged and reported.
"""


class BaseSolveFieldError(Exception):
    """
    Base exception, from which all internal exceptions should derive
    """


class FatalError(BaseSolveFieldError):
    """
    Base class for all exceptions which abort the whole batch
    """


class SkipInputError(BaseSolveFieldError):
    """
    Base class for all exceptions which abandon a single input
    """


class AlreadySolvedError(SkipInputError):
    """
    Raised when a solved file exists and solved inputs should be skipped
    """


class OutputExistsError(SkipInputError):
    """
    Raised when an output file exists and neither overwrite nor continue was set
    """


class ExecutableNotFoundError(FatalError, FileNotFoundError):
    """
    Raised when a required external program cannot be found
    """


class CommandFailedError(FatalError):
    """
    Raised when an external command exits with a nonzero status
    """

    def __init__(self, message: str, cmd: str = None, outcome=None):
        super().__init__(message)
        self.cmd = cmd
        self.outcome = outcome


class CommandCancelledError(CommandFailedError):
    """
    Raised when an external command was terminated by a cancellation signal
    """
