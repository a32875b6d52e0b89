"""
Compute provisioning: decide where generated statements run.

Resolution order
----------------
1. `local_spark`        → run on the active SparkSession (jobs already on a cluster).
2. `cluster_id` given   → start it; if it no longer exists, fall back to the default cluster.
3. `warehouse_id` given → use the warehouse as is.
4. none of them         → get (or create) and start the default single-node cluster.

Any SDK failure, including waiter failures and timeouts, surfaces as
ProvisioningError before statements are generated.
"""

from __future__ import annotations

from dataclasses import dataclass

from databricks.sdk import WorkspaceClient
from databricks.sdk.errors import DatabricksError, NotFound
from databricks.sdk.service.compute import DataSecurityMode, State

from src import settings
from src.logger import LOGGER
from src.sql_table.errors import ProvisioningError


@dataclass(frozen=True)
class ComputeRequest:
    """Caller-supplied compute preference; at most one field may be set."""

    cluster_id: str | None = None
    warehouse_id: str | None = None
    local_spark: bool = False

    def __post_init__(self) -> None:
        if sum((bool(self.cluster_id), bool(self.warehouse_id), self.local_spark)) > 1:
            raise ValueError("cluster_id, warehouse_id and local_spark are mutually exclusive.")


@dataclass(frozen=True)
class ExecutionTarget:
    """Resolved compute: exactly one field is set."""

    cluster_id: str | None = None
    warehouse_id: str | None = None
    local_spark: bool = False


class ComputeProvisioner:
    """Resolve a ComputeRequest into a running ExecutionTarget."""

    def __init__(
        self,
        client: WorkspaceClient,
        cluster_name: str = settings.DEFAULT_CLUSTER_NAME,
        autotermination_minutes: int = settings.CLUSTER_AUTOTERMINATION_MINUTES,
    ) -> None:
        self.client = client
        self.cluster_name = cluster_name
        self.autotermination_minutes = autotermination_minutes

    def resolve(self, request: ComputeRequest) -> ExecutionTarget:
        if request.local_spark:
            return ExecutionTarget(local_spark=True)
        # Cluster waiters raise RuntimeError (OperationFailed) or TimeoutError.
        try:
            if request.cluster_id:
                return ExecutionTarget(cluster_id=self._start_or_replace(request.cluster_id))
            if request.warehouse_id:
                return ExecutionTarget(warehouse_id=request.warehouse_id)
            return ExecutionTarget(cluster_id=self._get_or_create_default_cluster())
        except (DatabricksError, RuntimeError, TimeoutError) as error:
            raise ProvisioningError(
                f"cannot resolve compute for SQL execution: {type(error).__name__}: {error}"
            ) from error

    # ---------- helpers ----------

    def _start_or_replace(self, cluster_id: str) -> str:
        try:
            self.client.clusters.ensure_cluster_is_running(cluster_id)
            return cluster_id
        except NotFound:
            LOGGER.warning(
                "Cluster %s no longer exists; falling back to cluster '%s'.",
                cluster_id,
                self.cluster_name,
            )
            return self._get_or_create_default_cluster()

    def _get_or_create_default_cluster(self) -> str:
        for cluster in self.client.clusters.list():
            if cluster.cluster_name != self.cluster_name or cluster.cluster_id is None:
                continue
            if cluster.state != State.RUNNING:
                self.client.clusters.ensure_cluster_is_running(cluster.cluster_id)
            return cluster.cluster_id

        LOGGER.info("Creating cluster '%s' for SQL execution.", self.cluster_name)
        details = self.client.clusters.create_and_wait(
            cluster_name=self.cluster_name,
            spark_version=self.client.clusters.select_spark_version(latest=True),
            node_type_id=self.client.clusters.select_node_type(local_disk=True),
            num_workers=0,
            autotermination_minutes=self.autotermination_minutes,
            data_security_mode=DataSecurityMode.SINGLE_USER,
            spark_conf={
                "spark.databricks.cluster.profile": "singleNode",
                "spark.master": "local[*]",
            },
            custom_tags={"ResourceClass": "SingleNode"},
        )
        if details.cluster_id is None:
            raise ProvisioningError(f"cluster '{self.cluster_name}' was created without an id")
        return details.cluster_id
