"""
Identifier and literal formatting for generated DDL.

This module defines:
- Backtick quoting for identifiers (column, table and credential names).
- Escaping of single-quoted string literals (comments).
- Helpers to format, quote and parse three-part names.

Conventions:
- Verbs: quote_*, format_*, parse_*, escape_*/unescape_*.
- Identifiers are wrapped verbatim. Embedded backticks are NOT escaped, so a
  name containing a backtick yields invalid SQL; callers must not pass one.
"""

from __future__ import annotations


def quote_identifier(identifier: str) -> str:
    """Wrap a single identifier in backticks, verbatim."""
    return f"`{identifier}`"


def unescape_comment(text: str) -> str:
    """Turn every backslash-quote sequence back into a bare quote."""
    return (text or "").replace("\\'", "'")


def escape_comment(text: str) -> str:
    """
    Escape text for use inside a single-quoted SQL literal.

    Pre-escaped quotes are unescaped first, so the result carries exactly one
    level of escaping: both "it's" and "it\\'s" render as "it\\'s".
    """
    return unescape_comment(text).replace("'", "\\'")


def format_full_name(catalog_name: str, schema_name: str, table_name: str) -> str:
    """Unquoted: 'catalog.schema.table'."""
    return f"{catalog_name}.{schema_name}.{table_name}"


def quote_full_name(catalog_name: str, schema_name: str, table_name: str) -> str:
    """Backticked: `` `catalog`.`schema`.`table` ``."""
    return ".".join(quote_identifier(part) for part in (catalog_name, schema_name, table_name))


def parse_full_name(full_name: str) -> tuple[str, str, str]:
    """
    Parse 'catalog.schema.table' (with or without backticks on parts) into components.

    Raises:
        ValueError: if the name does not have exactly three non-empty parts.
    """
    cleaned = full_name.replace("`", "").strip()
    parts = [p.strip() for p in cleaned.split(".")]
    if len(parts) != 3 or any(p == "" for p in parts):
        raise ValueError(f"Expected three-part name 'catalog.schema.table', got: {full_name!r}")
    return parts[0], parts[1], parts[2]
