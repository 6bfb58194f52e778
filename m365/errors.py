"""Error taxonomy for Microsoft 365 commands.

All errors are CLIError subclasses so the dispatcher maps them to exit
codes without knowing about any particular service.
"""
from __future__ import annotations

from typing import Any, Optional

from core.cli_errors import (
    AuthError,
    CLIError,
    NotFoundError,
    PermissionDeniedError,
    UsageError,
    exit_code_for_status,
)


class InvalidSectionError(UsageError):
    """Requested section number is beyond the sections on the page."""

    def __init__(self, section: Any):
        super().__init__(f"Invalid section '{section}'")
        self.section = section


class InvalidColumnError(UsageError):
    """No column with the requested number exists in the section."""

    def __init__(self, column: Any):
        super().__init__(f"Invalid column '{column}'")
        self.column = column


class MalformedJsonPayloadError(UsageError):
    """A JSON option value could not be parsed."""

    def __init__(self, option: str, raw: str, reason: Any):
        super().__init__(f"Specified {option} is not a valid JSON string. Input: {raw}. Error: {reason}")
        self.option = option
        self.raw = raw


class UnknownWebPartError(NotFoundError):
    """The site's web part catalog has no component with the given id."""

    def __init__(self, web_part_id: str):
        super().__init__(f"There is no available WebPart with Id {web_part_id}.")
        self.web_part_id = web_part_id


class ApiError(CLIError):
    """A service answered with an HTTP error status."""

    def __init__(self, message: str, status_code: Optional[int] = None, hint: Optional[str] = None):
        super().__init__(message, exit_code_for_status(status_code), hint)
        self.status_code = status_code


__all__ = [
    "ApiError",
    "AuthError",
    "InvalidColumnError",
    "InvalidSectionError",
    "MalformedJsonPayloadError",
    "PermissionDeniedError",
    "UnknownWebPartError",
    "UsageError",
]
