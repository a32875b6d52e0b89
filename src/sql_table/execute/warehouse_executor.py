"""Run statements on a SQL warehouse through the Statement Execution API."""

from __future__ import annotations

from databricks.sdk import WorkspaceClient
from databricks.sdk.errors import DatabricksError
from databricks.sdk.service.sql import ExecuteStatementRequestOnWaitTimeout, StatementState

from src import settings
from src.sql_table.execute.ports import StatementResult


class WarehouseStatementExecutor:
    """
    Execute one statement synchronously on a warehouse.

    The call waits at most `wait_timeout_seconds`; on timeout the service is told
    to cancel the statement, which surfaces here as a failed result.
    """

    def __init__(
        self,
        client: WorkspaceClient,
        warehouse_id: str,
        wait_timeout_seconds: int = settings.SQL_EXEC_WAIT_TIMEOUT_SECONDS,
    ) -> None:
        self.client = client
        self.warehouse_id = warehouse_id
        self.wait_timeout_seconds = wait_timeout_seconds

    def execute(self, statement: str) -> StatementResult:
        try:
            response = self.client.statement_execution.execute_statement(
                statement=statement,
                warehouse_id=self.warehouse_id,
                wait_timeout=f"{self.wait_timeout_seconds}s",
                on_wait_timeout=ExecuteStatementRequestOnWaitTimeout.CANCEL,
            )
        except DatabricksError as error:
            return StatementResult.failed(f"{type(error).__name__}: {error}")

        status = response.status
        state = status.state if status is not None else None
        if state == StatementState.SUCCEEDED:
            return StatementResult.ok()
        return StatementResult.failed(self._failure_detail(status, state))

    def close(self) -> None:
        """Statement execution keeps no session open between calls."""

    @staticmethod
    def _failure_detail(status, state) -> str:
        """Prefer the service error message; fall back to the terminal state name."""
        error = getattr(status, "error", None)
        message = getattr(error, "message", None)
        state_name = state.value if isinstance(state, StatementState) else str(state)
        if message:
            return f"statement failed to execute: {state_name}: {message}"
        return f"statement failed to execute: {state_name}"
