"""
Configuration binding: plain mappings -> TableDescription, and the
boundary-level reconciliation of desired vs remote descriptions.

Config shape (field names follow the catalog API):

    {
        "catalog_name": "main", "schema_name": "sales", "name": "orders",
        "table_type": "MANAGED", "data_source_format": "DELTA",
        "column": [{"name": "id", "type": "INT", "nullable": False, "comment": "pk"}],
        "cluster_keys": ["id"], "comment": "...", "properties": {...},
        "options": {...}, "owner": "data-eng",
    }

The reconciliation helpers run before diffing and keep server-side noise
(managed properties, option echoes, server-assigned locations, undeclared
columns) from being reported as user drift. They are not part of the diff engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from src.enums import TableType
from src.sql_table.managed_properties import DEFAULT_CLASSIFIER, ManagedPropertyClassifier
from src.sql_table.models import Column, TableDescription

_OPTION_PROPERTY_PREFIX = "option."


def table_from_config(config: Mapping[str, Any]) -> TableDescription:
    """Build a TableDescription from a configuration mapping. Types are lower-cased."""
    columns = tuple(_column_from_config(c) for c in config.get("column") or ())
    return TableDescription(
        catalog_name=config["catalog_name"],
        schema_name=config["schema_name"],
        table_name=config["name"],
        table_type=TableType(str(config["table_type"]).upper()),
        data_source_format=config.get("data_source_format") or "",
        columns=columns,
        partitions=tuple(config.get("partitions") or ()),
        cluster_keys=tuple(config.get("cluster_keys") or ()),
        storage_location=config.get("storage_location") or "",
        storage_credential_name=config.get("storage_credential_name") or "",
        view_definition=config.get("view_definition") or "",
        comment=config.get("comment") or "",
        properties={str(k): str(v) for k, v in (config.get("properties") or {}).items()},
        options={str(k): str(v) for k, v in (config.get("options") or {}).items()},
        owner=config.get("owner"),
    )


def _column_from_config(config: Mapping[str, Any]) -> Column:
    return Column(
        name=config["name"],
        type_name=str(config.get("type") or "").lower(),
        comment=config.get("comment") or "",
        is_nullable=bool(config.get("nullable", True)),
    )


def carry_over_server_properties(
    desired: TableDescription,
    previous: TableDescription,
    classifier: ManagedPropertyClassifier = DEFAULT_CLASSIFIER,
) -> TableDescription:
    """
    Copy back previous properties the user never controlled: managed keys,
    options echoed as properties, and 'option.'-prefixed keys.
    """
    properties = dict(desired.properties)
    for key, value in previous.properties.items():
        if key in properties:
            continue
        if (
            classifier.is_managed(key)
            or key in desired.options
            or key.startswith(_OPTION_PROPERTY_PREFIX)
        ):
            properties[key] = value
    return replace(desired, properties=properties)


def carry_over_storage_location(
    desired: TableDescription, previous: TableDescription
) -> TableDescription:
    """
    Keep the previous location when the desired one is empty (server-assigned) or
    differs only by a trailing slash.
    """
    if desired.is_view or not previous.storage_location:
        return desired
    if not desired.storage_location or (
        desired.storage_location.rstrip("/") == previous.storage_location.rstrip("/")
    ):
        return replace(desired, storage_location=previous.storage_location)
    return desired


def carry_over_columns(desired: TableDescription, previous: TableDescription) -> TableDescription:
    """
    Keep the remote columns when no column list was configured. Views and
    schema-inferred tables report columns the configuration never declares.
    """
    if desired.columns:
        return desired
    return replace(desired, columns=previous.columns)


def reconcile_with_previous(
    desired: TableDescription,
    previous: TableDescription,
    classifier: ManagedPropertyClassifier = DEFAULT_CLASSIFIER,
) -> TableDescription:
    """Apply every boundary-level carry-over before validating and diffing."""
    reconciled = carry_over_columns(desired, previous)
    reconciled = carry_over_server_properties(reconciled, previous, classifier)
    return carry_over_storage_location(reconciled, previous)
