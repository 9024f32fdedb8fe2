"""
opgo2hex Error Reporting
========================

Maps exceptions raised during a run to a message on stderr and a process
exit code.

Exit Codes
----------
    0  success
    1  the project could not be assembled or encoded
    2  bad command-line arguments, or an input/output path problem
    3  a bug in the tool itself
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from opgo8085.errors import AssemblerError, OpgoError


class ExitCode(IntEnum):
    """Process exit codes for opgo2hex."""
    SUCCESS = 0
    BUILD_ERROR = 1
    INVALID_ARGS = 2
    INTERNAL_ERROR = 3


def exit_code_for(error: Exception) -> ExitCode:
    """Classify an exception raised during a run."""
    if isinstance(error, OpgoError):
        return ExitCode.BUILD_ERROR
    if isinstance(error, (click.BadParameter, OSError)):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def format_error(error: Exception, error_type: str | None = None) -> str:
    """
    Render an exception as the text shown to the user.

    AssemblerError messages are multi-line (location, source, hint) and
    start with their own "error:" marker, so they go below a header line
    instead of after a prefix.
    """
    if isinstance(error, AssemblerError):
        header = f"{error_type} failed:\n" if error_type else ""
        return f"{header}{error}"
    if isinstance(error, OpgoError):
        return f"{error_type} error: {error}" if error_type else f"Error: {error}"
    if exit_code_for(error) == ExitCode.INTERNAL_ERROR:
        return f"Internal error: {error}"
    return f"Error: {error}"


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None,
) -> NoReturn:
    """
    Report an exception and exit.

    Args:
        error: The exception that ended the run
        verbose: Print the traceback of unexpected errors
        error_type: Stage name used in the message (e.g. "Assembly")

    Raises:
        SystemExit: Always
    """
    code = exit_code_for(error)
    click.echo(format_error(error, error_type), err=True)
    if verbose and code == ExitCode.INTERNAL_ERROR:
        traceback.print_exc()
    sys.exit(code)
