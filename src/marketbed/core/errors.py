"""
Unified error handling for marketbed.

Every orchestration failure is one of a small set of error kinds, each
carrying the exit code the CLI reports for it.

Exit Codes:
- 0: Success
- 10: Configuration error
- 11: Provisioning error (registry, dependency or transport failure)
- 12: Environment mismatch (external environment lacks a resource)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    PROVISIONING_ERROR = 11
    ENVIRONMENT_MISMATCH = 12
    UNKNOWN_ERROR = 127


class MarketbedError(Exception):
    """Base exception for marketbed errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(MarketbedError):
    """Raised for configuration-related errors."""

    exit_code = ExitCode.CONFIG_ERROR


class ProvisioningError(MarketbedError):
    """Base for failures that abort an orchestration run."""

    exit_code = ExitCode.PROVISIONING_ERROR


class DuplicateResourceError(ProvisioningError):
    """Raised when a resource name is registered twice."""


class UnknownResourceError(ProvisioningError):
    """Raised when resolving a name that was never registered."""

    show_traceback = True


class UnresolvedDependencyError(ProvisioningError):
    """Raised when a step runs before one of its inputs exists.

    This is a plan ordering bug, never bad input.
    """

    show_traceback = True


class RegistrySealedError(ProvisioningError):
    """Raised when writing to a registry that has already been exported."""


class TransportError(ProvisioningError):
    """Raised when the provisioning transport fails an action."""


class EnvironmentMismatchError(ProvisioningError):
    """Raised when an external environment lacks an expected resource."""

    exit_code = ExitCode.ENVIRONMENT_MISMATCH


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Catches exceptions and converts them to exit codes with consistent
    error reporting.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - MarketbedError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except MarketbedError as e:
                print(f"error: {format_error_message(e)}", file=sys.stderr)
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=int(e.exit_code),
                        **e.details,
                    )
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130
            except Exception as e:
                print(f"error: unexpected {type(e).__name__}: {e}", file=sys.stderr)
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=int(ExitCode.UNKNOWN_ERROR),
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: MarketbedError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
