"""
Guard Report Exception Hierarchy

Exception Classes:
- GuardReportError: Base exception
- ValidationError: Required field missing or empty (answered with 400)
- StorageError: Database read/write failed (answered with a generic 500)
- MailError: Report email could not be sent (report is still saved)
- StartupError: Process cannot start, e.g. database unreachable

None of these are retried: a failed write or send surfaces immediately.
"""

from typing import Iterable


class GuardReportError(Exception):
    """Base exception for all Guard Report errors."""


class ValidationError(GuardReportError):
    """Input is missing a required field."""

    def __init__(self, message: str, fields: Iterable[str] = ()):
        super().__init__(message)
        self.message = message
        self.fields = list(fields)


class StorageError(GuardReportError):
    """The document store rejected or failed an operation."""


class MailError(GuardReportError):
    """The SMTP transport failed to deliver the report email."""


class StartupError(GuardReportError):
    """A process-scoped resource could not be initialized."""
