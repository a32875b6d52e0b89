"""Exceptions raised by the SQL table engine. None of them are retried here."""

from __future__ import annotations


class SqlTableError(Exception):
    """Base class for every failure surfaced to the caller."""


class ValidationError(SqlTableError):
    """
    Raised when a proposed change is structurally unsupported.

    Raised before any statement executes, so nothing has been applied.
    """


class ColumnTypeChangeError(ValidationError):
    """Raised when an existing column would change its type."""


class MixedColumnChangeError(ValidationError):
    """Raised when columns are added/removed and existing columns edited in one apply."""


class ExecutionError(SqlTableError):
    """
    Raised when a generated statement fails remotely (failed state, timeout
    cancellation or transport failure).

    Statements applied before the failing one stay applied.
    """

    def __init__(self, statement: str, detail: str) -> None:
        super().__init__(f"cannot execute {statement}: {detail}")
        self.statement = statement
        self.detail = detail


class ProvisioningError(SqlTableError):
    """Raised when the compute or warehouse target cannot be resolved or started."""
