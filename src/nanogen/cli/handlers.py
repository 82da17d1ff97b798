"""
Error handling for the CLI.

Maps library exceptions to exit codes and user-facing messages.
"""

import sys
from collections.abc import Callable

import click

from nanogen import (
    ConfigurationError,
    ValidationError,
    exception_to_message,
)
from nanogen.cli import progress
from nanogen.cli.utils import EXIT_PROVIDER_OR_NETWORK, EXIT_VALIDATION_OR_CONFIG


def map_exception_to_exit(exc: BaseException) -> tuple[int, str]:
    """Map library and known exceptions to (exit_code, user_message)."""
    message = exception_to_message(exc)
    if isinstance(exc, (ValidationError, ConfigurationError)):
        return (EXIT_VALIDATION_OR_CONFIG, message)
    return (EXIT_PROVIDER_OR_NETWORK, message)


def run_with_error_handling(fn: Callable[[], None], *, quiet: bool = False) -> None:
    """
    Run fn(); on exception map to exit code and message, print and sys.exit.
    Used so the generate flow stays free of try/except for known errors.
    """
    try:
        fn()
    except Exception as e:
        code, msg = map_exception_to_exit(e)
        if quiet:
            click.echo(msg, err=True)
        else:
            progress.print_error(msg)
        sys.exit(code)


__all__ = ["map_exception_to_exit", "run_with_error_handling"]
