"""Value objects describing a Unity Catalog table or view (desired or observed)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from src.enums import TableType
from src.sql_table.identifiers import format_full_name, quote_full_name


@dataclass(frozen=True)
class Column:
    """One column of a table or view; order in the owning table is physical order."""

    name: str
    type_name: str
    comment: str = ""
    is_nullable: bool = True


@dataclass(frozen=True)
class TableDescription:
    """
    Declarative description of one catalog object.

    Fields
    ------
    catalog_name, schema_name, table_name : str
        Identity (unescaped).
    table_type : TableType
        MANAGED, EXTERNAL or VIEW.
    data_source_format : str
        e.g. "DELTA" or "CSV"; empty for views.
    columns : tuple[Column, ...]
        Columns in physical order.
    partitions, cluster_keys : tuple[str, ...]
        Mutually exclusive layout columns.
    storage_location, storage_credential_name : str
        Tables only.
    view_definition : str
        Views only.
    properties : Mapping[str, str]
        TBLPROPERTIES; diffed on update.
    options : Mapping[str, str]
        OPTIONS; write-once at creation, never diffed.
    owner : str | None
        None → unmanaged, "" → current principal, "x" → set to "x".
    """

    catalog_name: str
    schema_name: str
    table_name: str
    table_type: TableType
    data_source_format: str = ""
    columns: tuple[Column, ...] = ()
    partitions: tuple[str, ...] = ()
    cluster_keys: tuple[str, ...] = ()
    storage_location: str = ""
    storage_credential_name: str = ""
    view_definition: str = ""
    comment: str = ""
    properties: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    options: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    owner: str | None = None

    def __post_init__(self) -> None:
        if self.partitions and self.cluster_keys:
            raise ValueError(
                f"{self.full_name}: partitions and cluster_keys are mutually exclusive."
            )
        if self.is_view and self.storage_location:
            raise ValueError(f"{self.full_name}: a view cannot have a storage location.")
        if not self.is_view and self.view_definition:
            raise ValueError(f"{self.full_name}: only a view can have a view definition.")
        names = self.column_names
        if len(set(names)) != len(names):
            raise ValueError(f"{self.full_name}: duplicate column names in {list(names)}.")

    # --------- Convenience properties ---------

    @property
    def full_name(self) -> str:
        """Unquoted full name: 'catalog.schema.table'. Used as the resource id."""
        return format_full_name(self.catalog_name, self.schema_name, self.table_name)

    @property
    def quoted_full_name(self) -> str:
        """Backticked full name for embedding in SQL text."""
        return quote_full_name(self.catalog_name, self.schema_name, self.table_name)

    @property
    def is_view(self) -> bool:
        return self.table_type == TableType.VIEW

    @property
    def object_keyword(self) -> str:
        """'VIEW' for views, 'TABLE' for everything else."""
        return TableType(self.table_type).object_keyword

    @property
    def column_names(self) -> tuple[str, ...]:
        """Column names in declared order."""
        return tuple(column.name for column in self.columns)
