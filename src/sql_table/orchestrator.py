"""
Lifecycle orchestration for one Unity Catalog table or view.

`Orchestrator` sequences the pure pieces with the collaborators:
  create: resolve compute → CREATE → owner → resource id
  read:   fetch the remote description
  update: resolve compute → fetch previous → reconcile → validate → diff → run → owner
  delete: resolve compute → DROP

Fail-fast: validation, provisioning and execution errors bubble up to the caller.
Statements run strictly one at a time; nothing is rolled back on failure. The
executor is closed after every call, whether or not its statements succeeded.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from databricks.sdk import WorkspaceClient

from src.logger import LOGGER
from src.sql_table.binding import reconcile_with_previous
from src.sql_table.compile.differ import Differ
from src.sql_table.compile.statement_builder import build_create_statement, build_drop_statement
from src.sql_table.execute.factory import build_executor
from src.sql_table.execute.ports import StatementExecutor
from src.sql_table.execute.runner import StatementRunner
from src.sql_table.models import TableDescription
from src.sql_table.provision.compute import ComputeProvisioner, ComputeRequest, ExecutionTarget
from src.sql_table.state.catalog_reader import CatalogReader
from src.sql_table.validation.validator import Validator

ExecutorFactory = Callable[[ExecutionTarget], StatementExecutor]


class Orchestrator:
    """Create, read, update and delete a table/view through generated DDL."""

    def __init__(
        self,
        client: WorkspaceClient,
        reader: CatalogReader | None = None,
        provisioner: ComputeProvisioner | None = None,
        validator: Validator | None = None,
        differ: Differ | None = None,
        executor_factory: ExecutorFactory | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Custom components can be injected for testing or alternate implementations.
        """
        self.client = client
        self.reader: CatalogReader = reader or CatalogReader(client)
        self.provisioner: ComputeProvisioner = provisioner or ComputeProvisioner(client)
        self.validator: Validator = validator or Validator()
        self.differ: Differ = differ or Differ()
        self.executor_factory: ExecutorFactory = executor_factory or (
            lambda target: build_executor(client, target)
        )

    # ---------- public API ----------

    def create(self, desired: TableDescription, compute: ComputeRequest = ComputeRequest()) -> str:
        """Create the object and return its resource id ('catalog.schema.table')."""
        with self._runner(compute) as runner:
            LOGGER.info("Creating %s %s.", desired.object_keyword.lower(), desired.full_name)
            runner.run([build_create_statement(desired, classifier=self.differ.classifier)])
        self._apply_owner(desired)
        return desired.full_name

    def read(self, resource_id: str) -> TableDescription:
        """Return the current remote description for `resource_id`."""
        return self.reader.get_table(resource_id)

    def update(
        self,
        resource_id: str,
        desired: TableDescription,
        compute: ComputeRequest = ComputeRequest(),
    ) -> list[str]:
        """Align the remote object with `desired`; return the statements applied."""
        with self._runner(compute) as runner:
            previous = self.reader.get_table(resource_id)
            reconciled = reconcile_with_previous(desired, previous, self.differ.classifier)
            self.validator.validate_columns(reconciled, previous)

            statements = self.differ.diff(reconciled, previous)
            LOGGER.info(
                "Update of %s: %d statement(s) planned.", desired.full_name, len(statements)
            )
            runner.run(statements)

        owner = self._resolve_owner(desired)
        if owner is not None and owner != previous.owner:
            self._set_owner(desired, owner)
        return statements

    def delete(self, desired: TableDescription, compute: ComputeRequest = ComputeRequest()) -> None:
        """Drop the object."""
        with self._runner(compute) as runner:
            LOGGER.info("Dropping %s %s.", desired.object_keyword.lower(), desired.full_name)
            runner.run([build_drop_statement(desired)])

    # ---------- helpers ----------

    @contextmanager
    def _runner(self, compute: ComputeRequest) -> Iterator[StatementRunner]:
        """
        Resolve compute first so provisioning errors precede statement generation,
        then close the executor once the block exits.
        """
        target = self.provisioner.resolve(compute)
        executor = self.executor_factory(target)
        try:
            yield StatementRunner(executor)
        finally:
            executor.close()

    def _resolve_owner(self, desired: TableDescription) -> str | None:
        """None → unmanaged; "" → current principal; otherwise the given owner."""
        if desired.owner is None:
            return None
        return desired.owner or self.reader.current_user_name()

    def _apply_owner(self, desired: TableDescription) -> None:
        owner = self._resolve_owner(desired)
        if owner is not None:
            self._set_owner(desired, owner)

    def _set_owner(self, desired: TableDescription, owner: str) -> None:
        LOGGER.info("Setting owner of %s to %s.", desired.full_name, owner)
        self.reader.set_owner(desired.full_name, owner)
