"""
Module for util/helper functions
"""

from solvefield.utils.execute_cmd import (
    CommandLine,
    Connector,
    ExecutionError,
    ExecutionOutcome,
    ProcessSpec,
    execute,
    find_executable,
    run_local,
)
