"""Run statements on an interactive cluster through the Command Execution API."""

from __future__ import annotations

from databricks.sdk import WorkspaceClient
from databricks.sdk.errors import DatabricksError, OperationFailed
from databricks.sdk.service.compute import Language, ResultType

from src.sql_table.execute.ports import StatementResult


class ClusterCommandExecutor:
    """
    Execute SQL commands in one execution context on a running cluster.

    The context is created on first use and reused for every later statement.
    """

    def __init__(self, client: WorkspaceClient, cluster_id: str) -> None:
        self.client = client
        self.cluster_id = cluster_id
        self._context_id: str | None = None

    def execute(self, statement: str) -> StatementResult:
        try:
            context_id = self._ensure_context()
            response = self.client.command_execution.execute_and_wait(
                cluster_id=self.cluster_id,
                context_id=context_id,
                language=Language.SQL,
                command=statement,
            )
        except (DatabricksError, OperationFailed, TimeoutError) as error:
            return StatementResult.failed(f"{type(error).__name__}: {error}")

        results = response.results
        if results is not None and results.result_type == ResultType.ERROR:
            return StatementResult.failed(results.cause or results.summary or "command failed")
        return StatementResult.ok()

    def close(self) -> None:
        """Destroy the execution context, if one was created."""
        if self._context_id is None:
            return
        self.client.command_execution.destroy(
            cluster_id=self.cluster_id, context_id=self._context_id
        )
        self._context_id = None

    def _ensure_context(self) -> str:
        if self._context_id is None:
            context = self.client.command_execution.create_and_wait(
                cluster_id=self.cluster_id, language=Language.SQL
            )
            self._context_id = context.id
        return self._context_id
