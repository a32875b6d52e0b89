"""Read live Unity Catalog metadata into TableDescription objects."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from databricks.sdk import WorkspaceClient

from src.enums import TableType
from src.sql_table.identifiers import parse_full_name
from src.sql_table.models import Column, TableDescription

_CLUSTERING_COLUMNS_PROPERTY = "clusteringColumns"


class CatalogReader:
    """Adapter around the Databricks SDK Tables and current-user APIs."""

    def __init__(self, client: WorkspaceClient) -> None:
        self.client = client

    # ---------- public ----------

    def get_table(self, full_name: str) -> TableDescription:
        """Fetch the current description of `full_name` ('catalog.schema.table')."""
        parse_full_name(full_name)  # reject malformed names before calling the API
        info = self.client.tables.get(full_name=full_name)
        return table_description_from_info(info)

    def set_owner(self, full_name: str, owner: str) -> None:
        self.client.tables.update(full_name=full_name, owner=owner)

    def current_user_name(self) -> str:
        """Return the current principal username, used when owner is reset."""
        me = self.client.current_user.me()
        if not getattr(me, "user_name", None):
            raise ValueError("Could not determine current user (user_name is empty).")
        return me.user_name


# ---------- conversion helpers ----------


def table_description_from_info(info: Any) -> TableDescription:
    """
    Convert an SDK TableInfo into a TableDescription.

    - Partition columns come from `ColumnInfo.partition_index`, in index order.
    - Cluster keys come from the `clusteringColumns` property (JSON list of paths).
    - Views never carry a storage location; tables never carry a view definition.
    """
    table_type = _table_type(info.table_type)
    is_view = table_type == TableType.VIEW
    column_infos = list(info.columns or [])
    properties = dict(info.properties or {})

    return TableDescription(
        catalog_name=info.catalog_name,
        schema_name=info.schema_name,
        table_name=info.name,
        table_type=table_type,
        data_source_format=_enum_text(info.data_source_format),
        columns=tuple(_column(c) for c in column_infos),
        partitions=_partitions(column_infos),
        cluster_keys=_cluster_keys(properties),
        storage_location="" if is_view else (info.storage_location or ""),
        storage_credential_name=getattr(info, "storage_credential_name", None) or "",
        view_definition=(info.view_definition or "") if is_view else "",
        comment=info.comment or "",
        properties=properties,
        owner=info.owner,
    )


def _enum_text(value: Any) -> str:
    """SDK enums expose `.value`; plain strings pass through; None → ""."""
    if value is None:
        return ""
    return str(getattr(value, "value", value))


def _table_type(value: Any) -> TableType:
    text = _enum_text(value)
    try:
        return TableType(text)
    except ValueError as error:
        raise ValueError(f"Unsupported table type: {text!r}") from error


def _column(info: Any) -> Column:
    return Column(
        name=info.name,
        type_name=(info.type_text or "").lower(),
        comment=info.comment or "",
        is_nullable=True if info.nullable is None else bool(info.nullable),
    )


def _partitions(column_infos: list[Any]) -> tuple[str, ...]:
    indexed = [c for c in column_infos if getattr(c, "partition_index", None) is not None]
    return tuple(c.name for c in sorted(indexed, key=lambda c: c.partition_index))


def _cluster_keys(properties: Mapping[str, str]) -> tuple[str, ...]:
    """Parse '[["a"],["b","c"]]' into ('a', 'b.c'); unparsable values yield ()."""
    raw = properties.get(_CLUSTERING_COLUMNS_PROPERTY)
    if not raw:
        return ()
    try:
        paths = json.loads(raw)
    except json.JSONDecodeError:
        return ()
    return tuple(".".join(path) if isinstance(path, list) else str(path) for path in paths)
