"""
Column reconciliation: desired vs previous column list -> ALTER statements.

Dispatch is on column COUNT, not column identity:
- counts differ → add/remove path, matched by name
- counts equal  → attribute path, matched by position

Known limitation: renaming and reordering in the same apply cannot be told
apart from in-place attribute edits. Type changes are never expressed here;
the validators reject them before this module runs.
"""

from __future__ import annotations

from src.sql_table.models import Column, TableDescription
from src.sql_table.sql import (
    sql_add_column,
    sql_drop_columns,
    sql_rename_column,
    sql_set_column_comment,
    sql_set_column_nullability,
)


def column_statements(desired: TableDescription, previous: TableDescription) -> list[str]:
    """Return the ordered column statements needed to move `previous` to `desired`."""
    if len(desired.columns) != len(previous.columns):
        return _membership_statements(desired, previous)
    return _attribute_statements(desired, previous)


def _membership_statements(desired: TableDescription, previous: TableDescription) -> list[str]:
    """One DROP for removed names, then one ADD per new name in desired order."""
    keyword = desired.object_keyword
    name = desired.quoted_full_name
    statements: list[str] = []

    desired_names = set(desired.column_names)
    previous_names = set(previous.column_names)

    removed = [c.name for c in previous.columns if c.name not in desired_names]
    drop = sql_drop_columns(keyword, name, removed)
    if drop is not None:
        statements.append(drop)

    for index, column in enumerate(desired.columns):
        if column.name in previous_names:
            continue
        # Position after whatever precedes it in the desired list, new or not.
        after = None if index == 0 else desired.columns[index - 1].name
        statements.append(sql_add_column(keyword, name, column, after))

    return statements


def _attribute_statements(desired: TableDescription, previous: TableDescription) -> list[str]:
    """Positional RENAME / COMMENT / nullability statements."""
    statements: list[str] = []
    for new, old in zip(desired.columns, previous.columns):
        statements.extend(_column_attribute_statements(desired, new, old))
    return statements


def _column_attribute_statements(
    desired: TableDescription, new: Column, old: Column
) -> list[str]:
    keyword = desired.object_keyword
    name = desired.quoted_full_name
    statements: list[str] = []
    if new.name != old.name:
        statements.append(sql_rename_column(keyword, name, old.name, new.name))
    if new.comment != old.comment:
        statements.append(sql_set_column_comment(keyword, name, new.name, new.comment))
    if new.is_nullable != old.is_nullable:
        statements.append(
            sql_set_column_nullability(keyword, name, new.name, make_nullable=new.is_nullable)
        )
    return statements
