"""Entry point: apply table/view descriptions from a JSON file to Unity Catalog."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import typer
from databricks.sdk.errors import NotFound

from src.logger import LOGGER
from src.sql_table.auth import get_workspace_client
from src.sql_table.binding import table_from_config
from src.sql_table.errors import SqlTableError
from src.sql_table.orchestrator import Orchestrator
from src.sql_table.provision.compute import ComputeRequest

ConfigArg = typer.Argument(..., help="JSON file holding a list of table configs.")

ClusterIdOpt = typer.Option(None, "--cluster-id", help="Run statements on this cluster.")

WarehouseIdOpt = typer.Option(None, "--warehouse-id", help="Run statements on this SQL warehouse.")

LocalSparkOpt = typer.Option(
    False,
    "--local-spark",
    help="Run statements on the active SparkSession (job already on a cluster).",
)

ProfileOpt = typer.Option(
    None,
    "--profile",
    "-p",
    help="Databricks CLI profile (from ~/.databrickscfg)",
)

app = typer.Typer(help="Apply Unity Catalog table and view configs as DDL.")


def sync_tables(
    orchestrator: Orchestrator,
    configs: Iterable[Mapping[str, Any]],
    compute: ComputeRequest = ComputeRequest(),
) -> None:
    """Create each object that does not exist yet and update the others, in order."""
    for config in configs:
        desired = table_from_config(config)
        try:
            orchestrator.read(desired.full_name)
        except NotFound:
            orchestrator.create(desired, compute)
            continue
        orchestrator.update(desired.full_name, desired, compute)


@app.command()
def main(
    config: Path = ConfigArg,
    cluster_id: str | None = ClusterIdOpt,
    warehouse_id: str | None = WarehouseIdOpt,
    local_spark: bool = LocalSparkOpt,
    profile: str | None = ProfileOpt,
) -> None:
    """Create or update every table and view listed in CONFIG."""
    if sum((bool(cluster_id), bool(warehouse_id), local_spark)) > 1:
        LOGGER.error("Use only one of --cluster-id, --warehouse-id and --local-spark.")
        raise typer.Exit(2)

    configs = json.loads(config.read_text())
    client = get_workspace_client(profile) if profile else get_workspace_client()
    LOGGER.info("Applying %d table config(s) from %s.", len(configs), config)
    try:
        sync_tables(
            Orchestrator(client),
            configs,
            ComputeRequest(
                cluster_id=cluster_id, warehouse_id=warehouse_id, local_spark=local_spark
            ),
        )
    except SqlTableError as exc:
        LOGGER.error("%s", exc)
        raise typer.Exit(1) from exc


if __name__ == "__main__":
    app()
