"""
SQL string builders for Unity Catalog tables and views.

All functions return fully-formed SQL text (or a clause of it) and take the
backticked three-part name produced by `TableDescription.quoted_full_name`.

Design guarantees
- Deterministic, side-effect free string generation.
- Identifier quoting and comment escaping via `identifiers`.
- No business rules: the statement builder and differ decide policy.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from src.sql_table.identifiers import escape_comment, quote_identifier
from src.sql_table.models import Column


def render_column_definition(column: Column) -> str:
    """Render: `name` type [NOT NULL] [COMMENT '...']"""
    not_null = "" if column.is_nullable else " NOT NULL"
    comment = f" COMMENT '{escape_comment(column.comment)}'" if column.comment else ""
    return f"{quote_identifier(column.name)} {column.type_name}{not_null}{comment}"


def render_column_definitions(columns: Iterable[Column]) -> str:
    """Comma-join column definitions: `id` int NOT NULL, `name` string"""
    return ", ".join(render_column_definition(column) for column in columns)


def render_key_values(pairs: Mapping[str, str]) -> str:
    """
    Render TBLPROPERTIES/OPTIONS assignments: 'k1'='v1', 'k2'='v2'.
    Keys are sorted for deterministic output.
    """
    return ", ".join(f"'{key}'='{value}'" for key, value in sorted(pairs.items()))


def render_location(storage_location: str, storage_credential_name: str = "") -> str:
    """LOCATION '<uri>'[ WITH (CREDENTIAL `name`)]"""
    clause = f"LOCATION '{storage_location}'"
    if storage_credential_name:
        clause += f" WITH (CREDENTIAL {quote_identifier(storage_credential_name)})"
    return clause


# ---------- table/view level ----------


def sql_drop(object_keyword: str, quoted_name: str) -> str:
    """DROP {TABLE|VIEW} ..."""
    return f"DROP {object_keyword} {quoted_name}"


def sql_alter_view_query(quoted_name: str, view_definition: str) -> str:
    """ALTER VIEW ... AS <query>"""
    return f"ALTER VIEW {quoted_name} AS {view_definition}"


def sql_set_location(
    quoted_name: str, storage_location: str, storage_credential_name: str = ""
) -> str:
    """ALTER TABLE ... SET LOCATION '...'[ WITH (CREDENTIAL ...)]"""
    return f"ALTER TABLE {quoted_name} SET {render_location(storage_location, storage_credential_name)}"


def sql_cluster_by(quoted_name: str, cluster_keys: Iterable[str]) -> str:
    """ALTER TABLE ... CLUSTER BY (...), or CLUSTER BY NONE when no keys remain."""
    keys = list(cluster_keys)
    target = f"({', '.join(keys)})" if keys else "NONE"
    return f"ALTER TABLE {quoted_name} CLUSTER BY {target}"


def sql_comment_on(object_keyword: str, quoted_name: str, comment: str) -> str:
    """COMMENT ON {TABLE|VIEW} ... IS '...'"""
    return f"COMMENT ON {object_keyword} {quoted_name} IS '{escape_comment(comment)}'"


def sql_unset_table_properties(
    object_keyword: str, quoted_name: str, keys: Iterable[str]
) -> str | None:
    """ALTER {TABLE|VIEW} ... UNSET TBLPROPERTIES IF EXISTS (...). None if no keys."""
    names = list(keys)
    if not names:
        return None
    return f"ALTER {object_keyword} {quoted_name} UNSET TBLPROPERTIES IF EXISTS ({', '.join(names)})"


def sql_set_table_properties(
    object_keyword: str, quoted_name: str, properties: Mapping[str, str]
) -> str:
    """ALTER {TABLE|VIEW} ... SET TBLPROPERTIES (...)"""
    return f"ALTER {object_keyword} {quoted_name} SET TBLPROPERTIES ({render_key_values(properties)})"


# ---------- columns ----------


def sql_drop_columns(
    object_keyword: str, quoted_name: str, column_names: Iterable[str]
) -> str | None:
    """ALTER {TABLE|VIEW} ... DROP COLUMN IF EXISTS (...). None if no names."""
    columns = [quote_identifier(name) for name in column_names]
    if not columns:
        return None
    return f"ALTER {object_keyword} {quoted_name} DROP COLUMN IF EXISTS ({', '.join(columns)})"


def sql_add_column(
    object_keyword: str, quoted_name: str, column: Column, after: str | None
) -> str:
    """ALTER {TABLE|VIEW} ... ADD COLUMN <definition> {FIRST|AFTER <name>}"""
    position = "FIRST" if after is None else f"AFTER {after}"
    return (
        f"ALTER {object_keyword} {quoted_name} "
        f"ADD COLUMN {render_column_definition(column)} {position}"
    )


def sql_rename_column(object_keyword: str, quoted_name: str, old_name: str, new_name: str) -> str:
    """ALTER {TABLE|VIEW} ... RENAME COLUMN `old` TO `new`"""
    return (
        f"ALTER {object_keyword} {quoted_name} "
        f"RENAME COLUMN {quote_identifier(old_name)} TO {quote_identifier(new_name)}"
    )


def sql_set_column_comment(
    object_keyword: str, quoted_name: str, column_name: str, comment: str
) -> str:
    """ALTER {TABLE|VIEW} ... ALTER COLUMN `col` COMMENT '...'"""
    return (
        f"ALTER {object_keyword} {quoted_name} "
        f"ALTER COLUMN {quote_identifier(column_name)} COMMENT '{escape_comment(comment)}'"
    )


def sql_set_column_nullability(
    object_keyword: str, quoted_name: str, column_name: str, make_nullable: bool
) -> str:
    """ALTER {TABLE|VIEW} ... ALTER COLUMN `col` DROP/SET NOT NULL"""
    op = "DROP NOT NULL" if make_nullable else "SET NOT NULL"
    return f"ALTER {object_keyword} {quoted_name} ALTER COLUMN {quote_identifier(column_name)} {op}"
