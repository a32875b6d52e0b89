"""
Validator: run column rules fail-fast before any statement is executed.

Rules are plain objects with `code`, `description` and
`check(desired_columns, previous_columns)`; a violation raises.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import ClassVar, Protocol

from src.sql_table.models import Column, TableDescription
from src.sql_table.validation.rules import (
    NoColumnTypeChange,
    NoMixedColumnMembershipAndAttributeChange,
)


class ColumnRule(Protocol):
    code: str
    description: str

    def check(self, desired: Sequence[Column], previous: Sequence[Column]) -> None: ...


class Validator:
    """Runs column rules in order; the first violation propagates."""

    DEFAULT_COLUMN_RULES: ClassVar[tuple[ColumnRule, ...]] = (
        NoColumnTypeChange(),
        NoMixedColumnMembershipAndAttributeChange(),
    )

    def __init__(self, column_rules: Iterable[ColumnRule] | None = None) -> None:
        self.column_rules: tuple[ColumnRule, ...] = (
            self.DEFAULT_COLUMN_RULES if column_rules is None else tuple(column_rules)
        )

    def validate_columns(self, desired: TableDescription, previous: TableDescription) -> None:
        """Check desired vs previous columns; raises ValidationError on a violation."""
        for rule in self.column_rules:
            rule.check(desired.columns, previous.columns)
