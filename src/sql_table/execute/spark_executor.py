"""Run statements on the local SparkSession (jobs and notebooks running in-cluster)."""

from __future__ import annotations

from pyspark.errors import PySparkException
from pyspark.sql import SparkSession

from src.sql_table.execute.ports import StatementResult


class SparkStatementExecutor:
    """Thin wrapper over `spark.sql`; a raised Spark error becomes a failed result."""

    def __init__(self, spark: SparkSession) -> None:
        self.spark = spark

    def execute(self, statement: str) -> StatementResult:
        """Execute the SQL immediately so DDL errors surface now (not lazily)."""
        try:
            self.spark.sql(statement).collect()
        except PySparkException as error:
            first_line = str(error).strip().splitlines()[0] if str(error).strip() else ""
            return StatementResult.failed(f"{type(error).__name__}: {first_line}")
        return StatementResult.ok()

    def close(self) -> None:
        """The session is shared with the caller; it is left running."""
