"""
Statement runner.

Executes statements strictly in order through one executor, waiting for each
to finish before issuing the next. The first failure stops the sequence and
raises ExecutionError; statements already applied are not rolled back.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.logger import LOGGER
from src.sql_table.errors import ExecutionError
from src.sql_table.execute.ports import StatementExecutor


class StatementRunner:
    """Runs a list of statements sequentially against a `StatementExecutor`."""

    def __init__(self, executor: StatementExecutor) -> None:
        self.executor = executor

    def run(self, statements: Sequence[str]) -> None:
        """Execute every statement in order; raise on the first failure."""
        for index, statement in enumerate(statements, start=1):
            LOGGER.info("Executing SQL (%d/%d): %s", index, len(statements), statement)
            result = self.executor.execute(statement)
            if not result.succeeded:
                LOGGER.error(
                    "Statement %d/%d failed, %d statement(s) already applied: %s",
                    index,
                    len(statements),
                    index - 1,
                    result.error,
                )
                raise ExecutionError(statement, result.error)
