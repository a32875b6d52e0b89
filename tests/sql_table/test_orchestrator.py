from __future__ import annotations

from types import SimpleNamespace

import pytest

import src.sql_table.orchestrator as orch_mod  # for monkeypatching LOGGER
from src.enums import TableType
from src.sql_table.binding import table_from_config
from src.sql_table.errors import ColumnTypeChangeError, ExecutionError, ProvisioningError
from src.sql_table.execute.ports import StatementResult
from src.sql_table.models import Column, TableDescription
from src.sql_table.orchestrator import Orchestrator
from src.sql_table.provision.compute import ComputeRequest, ExecutionTarget

Q = "`main`.`sales`.`orders`"

# ---------- fakes ----------


class FakeReader:
    def __init__(self, previous: TableDescription | None = None) -> None:
        self.previous = previous
        self.calls: list[tuple] = []

    def get_table(self, full_name: str) -> TableDescription:
        self.calls.append(("get_table", full_name))
        return self.previous

    def set_owner(self, full_name: str, owner: str) -> None:
        self.calls.append(("set_owner", full_name, owner))

    def current_user_name(self) -> str:
        self.calls.append(("current_user_name",))
        return "me@example.com"


class FakeProvisioner:
    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc
        self.requests: list[ComputeRequest] = []

    def resolve(self, request: ComputeRequest) -> ExecutionTarget:
        self.requests.append(request)
        if self.exc:
            raise self.exc
        return ExecutionTarget(warehouse_id="wh-1")


class FakeExecutor:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.executed: list[str] = []
        self.closed = 0

    def execute(self, statement: str) -> StatementResult:
        self.executed.append(statement)
        if self.fail:
            return StatementResult.failed("boom")
        return StatementResult.ok()

    def close(self) -> None:
        self.closed += 1


class FakeLogger:
    def info(self, *args, **kwargs) -> None:
        pass

    def error(self, *args, **kwargs) -> None:
        pass


@pytest.fixture(autouse=True)
def quiet_logger(monkeypatch):
    monkeypatch.setattr(orch_mod, "LOGGER", FakeLogger())


def make_table(**overrides) -> TableDescription:
    fields = dict(
        catalog_name="main",
        schema_name="sales",
        table_name="orders",
        table_type=TableType.MANAGED,
        data_source_format="DELTA",
        columns=(Column("id", "int"),),
    )
    fields.update(overrides)
    return TableDescription(**fields)


def make_orchestrator(reader=None, provisioner=None, executor=None):
    reader = reader or FakeReader()
    provisioner = provisioner or FakeProvisioner()
    executor = executor or FakeExecutor()
    targets: list[ExecutionTarget] = []

    def factory(target: ExecutionTarget) -> FakeExecutor:
        targets.append(target)
        return executor

    orchestrator = Orchestrator(
        client=object(),
        reader=reader,
        provisioner=provisioner,
        executor_factory=factory,
    )
    return orchestrator, reader, provisioner, executor, targets


# ---------- create ----------


def test_create_runs_one_statement_and_returns_resource_id():
    orch, reader, provisioner, executor, targets = make_orchestrator()
    compute = ComputeRequest(warehouse_id="wh-1")

    resource_id = orch.create(make_table(), compute)

    assert resource_id == "main.sales.orders"
    assert provisioner.requests == [compute]
    assert targets == [ExecutionTarget(warehouse_id="wh-1")]
    assert executor.executed == [f"CREATE TABLE {Q} (`id` int)\nUSING DELTA;"]
    assert reader.calls == []


def test_create_sets_explicit_owner():
    orch, reader, *_ = make_orchestrator()
    orch.create(make_table(owner="data-eng"))
    assert reader.calls == [("set_owner", "main.sales.orders", "data-eng")]


def test_create_with_empty_owner_uses_current_user():
    orch, reader, *_ = make_orchestrator()
    orch.create(make_table(owner=""))
    assert reader.calls == [
        ("current_user_name",),
        ("set_owner", "main.sales.orders", "me@example.com"),
    ]


def test_provisioning_failure_precedes_any_statement():
    executor = FakeExecutor()
    orch, *_ = make_orchestrator(
        provisioner=FakeProvisioner(exc=ProvisioningError("no compute")), executor=executor
    )
    with pytest.raises(ProvisioningError):
        orch.create(make_table())
    assert executor.executed == []


def test_execution_failure_propagates_and_skips_owner():
    orch, reader, *_ = make_orchestrator(executor=FakeExecutor(fail=True))
    with pytest.raises(ExecutionError):
        orch.create(make_table(owner="data-eng"))
    assert reader.calls == []


# ---------- read ----------


def test_read_delegates_to_reader():
    previous = make_table()
    orch, reader, *_ = make_orchestrator(reader=FakeReader(previous))
    assert orch.read("main.sales.orders") is previous
    assert reader.calls == [("get_table", "main.sales.orders")]


# ---------- update ----------


def test_update_without_drift_executes_nothing():
    previous = make_table(
        storage_location="s3://managed/abc",
        properties={"delta.minReaderVersion": "3"},
        owner="data-eng",
    )
    orch, reader, _, executor, _ = make_orchestrator(reader=FakeReader(previous))

    statements = orch.update("main.sales.orders", make_table())

    assert statements == []
    assert executor.executed == []
    assert reader.calls == [("get_table", "main.sales.orders")]


def test_update_runs_diff_in_order():
    previous = make_table(comment="old", properties={"a": "1"})
    desired = make_table(
        comment="new",
        properties={"a": "2"},
        columns=(Column("id", "int"), Column("name", "string")),
    )
    orch, _, _, executor, _ = make_orchestrator(reader=FakeReader(previous))

    statements = orch.update("main.sales.orders", desired)

    assert statements == [
        f"COMMENT ON TABLE {Q} IS 'new'",
        f"ALTER TABLE {Q} SET TBLPROPERTIES ('a'='2')",
        f"ALTER TABLE {Q} ADD COLUMN `name` string AFTER id",
    ]
    assert executor.executed == statements


def test_update_validation_failure_executes_nothing():
    previous = make_table(columns=(Column("id", "int"),))
    desired = make_table(columns=(Column("id", "string"),))
    orch, _, _, executor, _ = make_orchestrator(reader=FakeReader(previous))

    with pytest.raises(ColumnTypeChangeError):
        orch.update("main.sales.orders", desired)
    assert executor.executed == []


def test_update_changes_owner_only_when_different():
    previous = make_table(owner="old-team")
    orch, reader, *_ = make_orchestrator(reader=FakeReader(previous))

    orch.update("main.sales.orders", make_table(owner="old-team"))
    assert ("set_owner", "main.sales.orders", "old-team") not in reader.calls

    orch.update("main.sales.orders", make_table(owner="new-team"))
    assert reader.calls[-1] == ("set_owner", "main.sales.orders", "new-team")


# ---------- delete ----------


def test_delete_drops_view():
    view = make_table(
        table_name="orders_v",
        table_type=TableType.VIEW,
        data_source_format="",
        view_definition="SELECT 1",
    )
    orch, _, _, executor, _ = make_orchestrator()
    orch.delete(view)
    assert executor.executed == ["DROP VIEW `main`.`sales`.`orders_v`"]


# ---------- configs without a column list ----------


def test_update_of_view_config_without_columns_keeps_remote_columns():
    previous = make_table(
        schema_name="s",
        table_name="v",
        table_type=TableType.VIEW,
        data_source_format="",
        view_definition="SELECT 1 AS id",
        columns=(Column("id", "int"),),
    )
    desired = table_from_config(
        {
            "catalog_name": "main",
            "schema_name": "s",
            "name": "v",
            "table_type": "VIEW",
            "view_definition": "SELECT 1 AS id",
        }
    )
    orch, _, _, executor, _ = make_orchestrator(reader=FakeReader(previous))

    assert orch.update("main.s.v", desired) == []
    assert executor.executed == []


# ---------- executor lifecycle ----------


def test_executor_is_closed_after_every_call():
    previous = make_table(comment="old")
    orch, _, _, executor, _ = make_orchestrator(reader=FakeReader(previous))

    orch.create(make_table())
    orch.update("main.sales.orders", make_table(comment="new"))
    orch.delete(make_table())

    assert executor.closed == 3


def test_executor_is_closed_when_a_statement_fails():
    executor = FakeExecutor(fail=True)
    orch, *_ = make_orchestrator(executor=executor)

    with pytest.raises(ExecutionError):
        orch.delete(make_table())
    assert executor.closed == 1


class FakeCommandExecution:
    def __init__(self) -> None:
        self.destroyed: list[str] = []

    def create_and_wait(self, **kwargs):
        return SimpleNamespace(id=f"ctx-{len(self.destroyed)}")

    def execute_and_wait(self, **kwargs):
        return SimpleNamespace(results=None)

    def destroy(self, **kwargs):
        self.destroyed.append(kwargs["context_id"])


class ClusterProvisioner:
    def resolve(self, request: ComputeRequest) -> ExecutionTarget:
        return ExecutionTarget(cluster_id="cl-1")


def test_cluster_contexts_are_destroyed_with_default_executors():
    commands = FakeCommandExecution()
    orch = Orchestrator(
        client=SimpleNamespace(command_execution=commands),
        reader=FakeReader(),
        provisioner=ClusterProvisioner(),
    )

    for _ in range(3):
        orch.delete(make_table())

    assert commands.destroyed == ["ctx-0", "ctx-1", "ctx-2"]


# ---------- owner reset ----------


def test_owner_reset_skips_set_when_current_user_already_owns():
    previous = make_table(owner="me@example.com")
    orch, reader, *_ = make_orchestrator(reader=FakeReader(previous))

    orch.update("main.sales.orders", make_table(owner=""))

    assert not any(call[0] == "set_owner" for call in reader.calls)


def test_owner_reset_sets_current_user_when_owner_differs():
    previous = make_table(owner="old-team")
    orch, reader, *_ = make_orchestrator(reader=FakeReader(previous))

    orch.update("main.sales.orders", make_table(owner=""))

    assert reader.calls[-1] == ("set_owner", "main.sales.orders", "me@example.com")
