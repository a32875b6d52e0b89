import pytest

import src.sql_table.execute.runner as runner_mod  # for monkeypatching LOGGER
from src.sql_table.errors import ExecutionError, SqlTableError
from src.sql_table.execute.ports import StatementResult
from src.sql_table.execute.runner import StatementRunner

# ---------- fakes ----------


class FakeExecutor:
    """Records statements; fails on the ones listed in `fail_on`."""

    def __init__(self, fail_on: dict[str, str] | None = None) -> None:
        self.fail_on = fail_on or {}
        self.executed: list[str] = []

    def execute(self, statement: str) -> StatementResult:
        self.executed.append(statement)
        if statement in self.fail_on:
            return StatementResult.failed(self.fail_on[statement])
        return StatementResult.ok()


class FakeLogger:
    def __init__(self) -> None:
        self.infos: list[str] = []
        self.errors: list[str] = []

    def info(self, msg, *args) -> None:
        self.infos.append(msg % args if args else msg)

    def error(self, msg, *args) -> None:
        self.errors.append(msg % args if args else msg)


@pytest.fixture
def fake_logger(monkeypatch) -> FakeLogger:
    logger = FakeLogger()
    monkeypatch.setattr(runner_mod, "LOGGER", logger)
    return logger


# ---------- tests ----------


def test_runs_every_statement_in_order(fake_logger):
    executor = FakeExecutor()
    StatementRunner(executor).run(["S1", "S2", "S3"])

    assert executor.executed == ["S1", "S2", "S3"]
    assert fake_logger.infos == [
        "Executing SQL (1/3): S1",
        "Executing SQL (2/3): S2",
        "Executing SQL (3/3): S3",
    ]
    assert fake_logger.errors == []


def test_empty_list_executes_nothing(fake_logger):
    executor = FakeExecutor()
    StatementRunner(executor).run([])
    assert executor.executed == []
    assert fake_logger.infos == []


def test_first_failure_stops_and_raises(fake_logger):
    executor = FakeExecutor(fail_on={"S2": "PARSE_SYNTAX_ERROR"})

    with pytest.raises(ExecutionError) as excinfo:
        StatementRunner(executor).run(["S1", "S2", "S3"])

    assert executor.executed == ["S1", "S2"]
    error = excinfo.value
    assert isinstance(error, SqlTableError)
    assert error.statement == "S2"
    assert error.detail == "PARSE_SYNTAX_ERROR"
    assert str(error) == "cannot execute S2: PARSE_SYNTAX_ERROR"
    assert len(fake_logger.errors) == 1
    assert "1 statement(s) already applied" in fake_logger.errors[0]


def test_statement_result_constructors():
    assert StatementResult.ok() == StatementResult(succeeded=True, error="")
    assert StatementResult.failed("x") == StatementResult(succeeded=False, error="x")
