"""
Execution ports and result types.

- StatementExecutor: protocol for anything that can run one SQL statement
  (SQL warehouse, cluster command context, local SparkSession, fakes) and be
  closed once the caller is done with it.
- StatementResult: structured outcome of a single statement.

Contract: at most one statement is outstanding per executor; callers wait for
each result before issuing the next statement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StatementResult:
    """Outcome for a single statement; `error` is a one-line detail on failure."""

    succeeded: bool
    error: str = ""

    @classmethod
    def ok(cls) -> StatementResult:
        return cls(succeeded=True)

    @classmethod
    def failed(cls, error: str) -> StatementResult:
        return cls(succeeded=False, error=error)


class StatementExecutor(Protocol):
    """Executor capable of running one SQL statement to completion."""

    def execute(self, statement: str) -> StatementResult: ...

    def close(self) -> None:
        """Release whatever the executor holds open on the remote side."""
        ...
