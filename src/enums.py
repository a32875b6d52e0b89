"""Enumerations used throughout the SQL table engine."""

from enum import StrEnum


class TableType(StrEnum):
    """Kind of catalog object a table description declares."""

    MANAGED = "MANAGED"
    EXTERNAL = "EXTERNAL"
    VIEW = "VIEW"

    @property
    def object_keyword(self) -> str:
        """SQL keyword used in CREATE/ALTER/DROP statements."""
        return "VIEW" if self is TableType.VIEW else "TABLE"
