"""Build the Databricks WorkspaceClient used by every collaborator."""

from __future__ import annotations

from databricks.sdk import WorkspaceClient
from databricks.sdk.core import Config

from src import settings
from src.sql_table.errors import ProvisioningError


def _sanitize_host(host: str | None) -> str | None:
    """Strip query strings (e.g. '?o=123') and trailing slashes from a workspace URL."""
    if not host:
        return host
    return host.split("?", 1)[0].rstrip("/")


def get_workspace_client(profile: str | None = settings.DATABRICKS_PROFILE) -> WorkspaceClient:
    """
    Resolve unified auth (~/.databrickscfg or environment variables) into a client.

    Raises:
        ProvisioningError: when the configuration cannot be resolved.
    """
    try:
        config = Config(profile=profile) if profile else Config()
    except ValueError as error:
        raise ProvisioningError(f"Databricks authentication failed: {error}") from error
    config.host = _sanitize_host(config.host)
    return WorkspaceClient(config=config)
