"""
Pre-flight column rules.

- Centralised RuleCode (StrEnum)
- Column type normalisation (case + alias table)
- One rule per unsupported change shape; each raises a ValidationError subclass
- Function aliases for callers that want a single check
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Final

from src.sql_table.errors import ColumnTypeChangeError, MixedColumnChangeError
from src.sql_table.models import Column

_COLUMN_TYPE_ALIASES: Final[dict[str, str]] = {
    "integer": "int",
    "long": "bigint",
    "real": "float",
    "short": "smallint",
    "byte": "tinyint",
    "decimal": "decimal(10,0)",
    "dec": "decimal(10,0)",
    "numeric": "decimal(10,0)",
}


class RuleCode(StrEnum):
    """Stable identifiers for each column rule."""

    NO_COLUMN_TYPE_CHANGE = "NO_COLUMN_TYPE_CHANGE"
    NO_MIXED_COLUMN_MEMBERSHIP_AND_ATTRIBUTE_CHANGE = (
        "NO_MIXED_COLUMN_MEMBERSHIP_AND_ATTRIBUTE_CHANGE"
    )


def normalize_column_type(type_name: str) -> str:
    """Lower-case a type token and resolve aliases: 'INTEGER' -> 'int'."""
    lowered = type_name.lower()
    return _COLUMN_TYPE_ALIASES.get(lowered, lowered)


class NoColumnTypeChange:
    """With equal column counts, no position may change its (normalised) type."""

    code = RuleCode.NO_COLUMN_TYPE_CHANGE.value
    description = "Changing the type of an existing column is not supported."

    def check(self, desired: Sequence[Column], previous: Sequence[Column]) -> None:
        """Raise ColumnTypeChangeError on the first positional type difference."""
        if len(desired) != len(previous):
            return
        for new, old in zip(desired, previous):
            if normalize_column_type(new.type_name) != normalize_column_type(old.type_name):
                raise ColumnTypeChangeError(
                    f"changing the 'type' of an existing column is not supported: "
                    f"column '{old.name}' from {old.type_name} to {new.type_name}"
                )


class NoMixedColumnMembershipAndAttributeChange:
    """
    With different column counts, columns present on both sides must keep
    their type, nullability and comment.
    """

    code = RuleCode.NO_MIXED_COLUMN_MEMBERSHIP_AND_ATTRIBUTE_CHANGE.value
    description = "Adding/removing columns and editing existing ones must be separate applies."

    def check(self, desired: Sequence[Column], previous: Sequence[Column]) -> None:
        """Raise MixedColumnChangeError when a shared column also changed."""
        if len(desired) == len(previous):
            return
        desired_by_name = {column.name: column for column in desired}
        for old in previous:
            new = desired_by_name.get(old.name)
            if new is None:
                continue
            if (
                normalize_column_type(new.type_name) != normalize_column_type(old.type_name)
                or new.is_nullable != old.is_nullable
                or new.comment != old.comment
            ):
                raise MixedColumnChangeError(
                    "detected changes in both number of columns and existing column "
                    f"field values (column '{old.name}'), please do not change number "
                    "of columns and update column values at the same time"
                )


def validate_no_type_change(desired: Sequence[Column], previous: Sequence[Column]) -> None:
    NoColumnTypeChange().check(desired, previous)


def validate_no_mixed_column_and_membership_change(
    desired: Sequence[Column], previous: Sequence[Column]
) -> None:
    NoMixedColumnMembershipAndAttributeChange().check(desired, previous)
