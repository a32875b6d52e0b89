"""Pick the statement executor matching a resolved execution target."""

from __future__ import annotations

from databricks.sdk import WorkspaceClient
from pyspark.sql import SparkSession

from src.sql_table.execute.cluster_executor import ClusterCommandExecutor
from src.sql_table.execute.ports import StatementExecutor
from src.sql_table.execute.spark_executor import SparkStatementExecutor
from src.sql_table.execute.warehouse_executor import WarehouseStatementExecutor
from src.sql_table.provision.compute import ExecutionTarget


def build_executor(client: WorkspaceClient, target: ExecutionTarget) -> StatementExecutor:
    """
    Local SparkSession when running in-cluster, warehouse statement execution when
    a warehouse is resolved, cluster commands otherwise.
    """
    if target.local_spark:
        return SparkStatementExecutor(SparkSession.builder.getOrCreate())
    if target.warehouse_id:
        return WarehouseStatementExecutor(client, target.warehouse_id)
    if target.cluster_id:
        return ClusterCommandExecutor(client, target.cluster_id)
    raise ValueError("ExecutionTarget must carry a cluster_id, a warehouse_id or local_spark.")
