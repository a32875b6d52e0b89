"""
Statement builder: desired description -> full CREATE statement.

Clause order is fixed:
  CREATE [EXTERNAL] {TABLE|VIEW} <name> (<columns>)
  USING <format>                    (tables only)
  PARTITIONED BY (...) | CLUSTER BY (...)
  COMMENT '...'
  TBLPROPERTIES (...)               (non-managed keys only)
  OPTIONS (...)                     (non-managed keys only)
  LOCATION '...' [WITH (CREDENTIAL `c`)]  |  AS <query>  (views)
  ;

Absent clauses are omitted. Pure and total over a valid TableDescription.
"""

from __future__ import annotations

from src.enums import TableType
from src.sql_table.identifiers import escape_comment
from src.sql_table.managed_properties import DEFAULT_CLASSIFIER, ManagedPropertyClassifier
from src.sql_table.models import TableDescription
from src.sql_table.sql import (
    render_column_definitions,
    render_key_values,
    render_location,
    sql_drop,
)


def build_create_statement(
    desired: TableDescription,
    *,
    classifier: ManagedPropertyClassifier = DEFAULT_CLASSIFIER,
) -> str:
    """Render the single CREATE statement for `desired`."""
    external = "EXTERNAL " if desired.table_type == TableType.EXTERNAL else ""
    head = f"CREATE {external}{desired.object_keyword} {desired.quoted_full_name}"
    if desired.columns:
        head += f" ({render_column_definitions(desired.columns)})"

    clauses: list[str] = [head]

    if not desired.is_view and desired.data_source_format:
        clauses.append(f"USING {desired.data_source_format}")

    if desired.partitions:
        clauses.append(f"PARTITIONED BY ({', '.join(desired.partitions)})")

    if desired.cluster_keys:
        clauses.append(f"CLUSTER BY ({', '.join(desired.cluster_keys)})")

    if desired.comment:
        clauses.append(f"COMMENT '{escape_comment(desired.comment)}'")

    properties = classifier.user_controlled(desired.properties)
    if properties:
        clauses.append(f"TBLPROPERTIES ({render_key_values(properties)})")

    options = classifier.user_controlled(desired.options)
    if options:
        clauses.append(f"OPTIONS ({render_key_values(options)})")

    if desired.is_view:
        clauses.append(f"AS {desired.view_definition}")
    elif desired.storage_location:
        clauses.append(render_location(desired.storage_location, desired.storage_credential_name))

    return "\n".join(clauses) + ";"


def build_drop_statement(desired: TableDescription) -> str:
    """Render DROP {TABLE|VIEW} for `desired`."""
    return sql_drop(desired.object_keyword, desired.quoted_full_name)
