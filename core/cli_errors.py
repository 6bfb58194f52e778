"""Exit codes and the CLIError hierarchy.

Commands raise a CLIError subclass; the dispatcher (and pipeline
producers) print it as ``Error: ...``/``Hint: ...`` on stderr and exit
with the subclass's code.
"""
from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Dict, Optional


class ExitCode(IntEnum):
    """Process exit codes shared by every command."""
    SUCCESS = 0
    ERROR = 1
    USAGE = 2
    CONFIG_ERROR = 3
    AUTH_ERROR = 4
    NETWORK_ERROR = 5
    NOT_FOUND = 6
    PERMISSION_DENIED = 7
    INTERRUPTED = 130  # 128 + SIGINT


@dataclass
class CLIError(Exception):
    """Error reported to the user with an exit code and optional hint."""
    message: str
    code: ExitCode = ExitCode.ERROR
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


class _FixedCodeError(CLIError):
    exit_code: ClassVar[ExitCode] = ExitCode.ERROR

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, self.exit_code, hint)


class ConfigError(_FixedCodeError):
    exit_code = ExitCode.CONFIG_ERROR


class AuthError(_FixedCodeError):
    """No usable token, or the service rejected it."""
    exit_code = ExitCode.AUTH_ERROR


class NetworkError(_FixedCodeError):
    """Transport failure talking to a service."""
    exit_code = ExitCode.NETWORK_ERROR


class NotFoundError(_FixedCodeError):
    exit_code = ExitCode.NOT_FOUND


class PermissionDeniedError(_FixedCodeError):
    """The signed-in account may not perform the operation."""
    exit_code = ExitCode.PERMISSION_DENIED


class UsageError(_FixedCodeError):
    """Invalid option value or option combination."""
    exit_code = ExitCode.USAGE


_STATUS_EXIT_CODES: Dict[int, ExitCode] = {
    401: ExitCode.AUTH_ERROR,
    403: ExitCode.PERMISSION_DENIED,
    404: ExitCode.NOT_FOUND,
}


def exit_code_for_status(status_code: Optional[int]) -> ExitCode:
    """Map an HTTP error status to the exit code a command should return."""
    return _STATUS_EXIT_CODES.get(status_code or 0, ExitCode.ERROR)


def print_error(message: Optional[str], hint: Optional[str] = None) -> None:
    if message:
        print(f"Error: {message}", file=sys.stderr)
    if hint:
        print(f"Hint: {hint}", file=sys.stderr)


def handle_error(error: BaseException, verbose: bool = False) -> int:
    """Report an exception on stderr and return the exit code to use.

    Args:
        error: The exception to handle.
        verbose: Also print the traceback of unexpected (non-CLIError) errors.
    """
    if isinstance(error, CLIError):
        print_error(error.message, error.hint)
        return error.code
    if isinstance(error, KeyboardInterrupt):
        print("\nInterrupted.", file=sys.stderr)
        return ExitCode.INTERRUPTED

    print_error(str(error) or type(error).__name__)
    if verbose:
        traceback.print_exception(type(error), error, error.__traceback__)
    return ExitCode.ERROR
