"""
Classifier for server-managed table properties.

Databricks adds a number of properties to every table and view on its own.
They must never appear in a generated TBLPROPERTIES/OPTIONS clause and must
never be treated as user-removed drift when the remote copy carries them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

DEFAULT_MANAGED_PROPERTIES: Final[frozenset[str]] = frozenset(
    {
        # Set when the table uses cluster keys.
        "clusteringColumns",
        "delta.lastCommitTimestamp",
        "delta.lastUpdateVersion",
        "delta.minReaderVersion",
        "delta.minWriterVersion",
        "delta.columnMapping.maxColumnId",
        "delta.enableDeletionVectors",
        "delta.enableRowTracking",
        "delta.feature.clustering",
        "delta.feature.changeDataFeed",
        "delta.feature.deletionVectors",
        "delta.feature.domainMetadata",
        "delta.feature.liquid",
        "delta.feature.rowTracking",
        "delta.feature.v2Checkpoint",
        "delta.feature.timestampNtz",
        "delta.liquid.clusteringColumns",
        "delta.rowTracking.materializedRowCommitVersionColumnName",
        "delta.rowTracking.materializedRowIdColumnName",
        "delta.checkpoint.writeStatsAsJson",
        "delta.checkpoint.writeStatsAsStruct",
        "delta.checkpointPolicy",
        "view.catalogAndNamespace.numParts",
        "view.catalogAndNamespace.part.0",
        "view.catalogAndNamespace.part.1",
        "view.query.out.col.0",
        "view.query.out.numCols",
        "view.referredTempFunctionsNames",
        "view.referredTempViewNames",
        "view.sqlConfig.spark.sql.hive.convertCTAS",
        "view.sqlConfig.spark.sql.legacy.createHiveTableByDefault",
        "view.sqlConfig.spark.sql.parquet.compression.codec",
        "view.sqlConfig.spark.sql.session.timeZone",
        "view.sqlConfig.spark.sql.sources.commitProtocolClass",
        "view.sqlConfig.spark.sql.sources.default",
        "view.sqlConfig.spark.sql.streaming.stopTimeout",
    }
)


@dataclass(frozen=True)
class ManagedPropertyClassifier:
    """Set-membership test over property/option keys (keys are case-sensitive)."""

    keys: frozenset[str] = DEFAULT_MANAGED_PROPERTIES

    def is_managed(self, key: str) -> bool:
        """True if `key` is maintained by the server rather than the user."""
        return key in self.keys

    def extended(self, *keys: str) -> ManagedPropertyClassifier:
        """Return a new classifier that also treats `keys` as managed."""
        return ManagedPropertyClassifier(keys=self.keys | frozenset(keys))

    def user_controlled(self, mapping: Mapping[str, str] | None) -> dict[str, str]:
        """Return the entries of `mapping` whose keys are not managed."""
        return {k: v for k, v in (mapping or {}).items() if not self.is_managed(k)}


DEFAULT_CLASSIFIER: Final[ManagedPropertyClassifier] = ManagedPropertyClassifier()
