"""
Diff engine: desired description + previous description -> ordered DDL.

Principles
----------
- No side effects; this module only computes statement text.
- Fixed ordering: kind-specific attributes, then common attributes, then columns.
- Options are write-once at creation and never diffed.
- Managed property keys are never unset, even when the previous copy has them.

Output
------
Flat list of SQL strings, to be executed strictly in order. `diff(x, x) == []`.
"""

from __future__ import annotations

from src.sql_table.compile.columns import column_statements
from src.sql_table.managed_properties import DEFAULT_CLASSIFIER, ManagedPropertyClassifier
from src.sql_table.models import TableDescription
from src.sql_table.sql import (
    sql_alter_view_query,
    sql_cluster_by,
    sql_comment_on,
    sql_set_location,
    sql_set_table_properties,
    sql_unset_table_properties,
)


class Differ:
    """
    Compute the statements that move a previous description to the desired one.

    Workflow
    --------
    1. View query (views) or location + cluster keys (tables).
    2. Comment, then properties (UNSET removed keys, then SET the desired ones).
    3. Column reconciliation.
    """

    def __init__(self, classifier: ManagedPropertyClassifier = DEFAULT_CLASSIFIER) -> None:
        self.classifier = classifier

    def diff(self, desired: TableDescription, previous: TableDescription) -> list[str]:
        """Return the ordered statements needed to align `previous` with `desired`."""
        statements: list[str] = []
        if desired.is_view:
            statements.extend(_diff_view_definition(desired, previous))
        else:
            statements.extend(_diff_location(desired, previous))
            statements.extend(_diff_cluster_keys(desired, previous))
        statements.extend(_diff_comment(desired, previous))
        statements.extend(self._diff_properties(desired, previous))
        statements.extend(column_statements(desired, previous))
        return statements

    def _diff_properties(self, desired: TableDescription, previous: TableDescription) -> list[str]:
        """
        UNSET keys the previous copy has and the desired one does not (managed keys
        excluded), then re-assert every non-managed desired property with one SET.
        No SET is emitted once no user property remains.
        """
        if dict(desired.properties) == dict(previous.properties):
            return []

        keyword = desired.object_keyword
        name = desired.quoted_full_name
        statements: list[str] = []

        removed = [
            key
            for key in previous.properties
            if key not in desired.properties and not self.classifier.is_managed(key)
        ]
        unset = sql_unset_table_properties(keyword, name, removed)
        if unset is not None:
            statements.append(unset)

        user_properties = self.classifier.user_controlled(desired.properties)
        if user_properties:
            statements.append(sql_set_table_properties(keyword, name, user_properties))
        return statements


def diff(
    desired: TableDescription,
    previous: TableDescription,
    *,
    classifier: ManagedPropertyClassifier = DEFAULT_CLASSIFIER,
) -> list[str]:
    """Convenience wrapper around `Differ(classifier).diff(desired, previous)`."""
    return Differ(classifier).diff(desired, previous)


# ---------- aspect helpers ----------


def _diff_view_definition(desired: TableDescription, previous: TableDescription) -> list[str]:
    if desired.view_definition == previous.view_definition:
        return []
    return [sql_alter_view_query(desired.quoted_full_name, desired.view_definition)]


def _diff_location(desired: TableDescription, previous: TableDescription) -> list[str]:
    if desired.storage_location == previous.storage_location:
        return []
    return [
        sql_set_location(
            desired.quoted_full_name,
            desired.storage_location,
            desired.storage_credential_name,
        )
    ]


def _diff_cluster_keys(desired: TableDescription, previous: TableDescription) -> list[str]:
    """Ordered comparison: (a, b) and (b, a) are different clusterings."""
    if tuple(desired.cluster_keys) == tuple(previous.cluster_keys):
        return []
    return [sql_cluster_by(desired.quoted_full_name, desired.cluster_keys)]


def _diff_comment(desired: TableDescription, previous: TableDescription) -> list[str]:
    if desired.comment == previous.comment:
        return []
    return [sql_comment_on(desired.object_keyword, desired.quoted_full_name, desired.comment)]
