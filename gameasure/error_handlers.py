import logging
import sys
from functools import wraps

import click

from gameasure.console import main_console as console
from gameasure.constants import EXIT_CODE_FAILURE, EXIT_CODE_OK
from gameasure.errors import GAMeasurementError


LOG = logging.getLogger(__name__)


def output_exception(exception: Exception, exit_code_output: bool = True) -> None:
    """
    Output an exception message to the console and exit.

    Args:
        exception (Exception): The exception to output.
        exit_code_output (bool): Whether to output the exit code.
    """
    console.print(f"[error]{exception}[/error]")

    if exit_code_output:
        exit_code = EXIT_CODE_FAILURE
        if hasattr(exception, "get_exit_code"):
            exit_code = exception.get_exit_code()
    else:
        exit_code = EXIT_CODE_OK

    sys.exit(exit_code)


def handle_cmd_exception(func):
    """
    Decorator to handle exceptions in command functions.
    """

    @wraps(func)
    def inner(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except GAMeasurementError as e:
            LOG.exception("Expected GAMeasurementError happened: %s", e)
            output_exception(e, exit_code_output=True)
        except ValueError as e:
            LOG.exception("Invalid configuration: %s", e)
            raise click.UsageError(str(e))

    return inner
