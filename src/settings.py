"""Configuration values sourced from environment variables."""

import os
from typing import Final

LOG_LEVEL: Final[str] = os.getenv(key="LOG_LEVEL", default="INFO")
LOGGER_NAME: Final[str] = os.getenv(key="LOGGER_NAME", default="sql-table-engine")
LOG_COLOUR_ENABLED: Final[bool] = bool(
    os.getenv(key="LOG_COLOUR_ENABLED", default="True").upper() == "TRUE"
)

# Upper bound the statement execution API accepts for a synchronous wait.
SQL_EXEC_WAIT_TIMEOUT_SECONDS: Final[int] = int(
    os.getenv(key="SQL_EXEC_WAIT_TIMEOUT_SECONDS", default="50")
)
DEFAULT_CLUSTER_NAME: Final[str] = os.getenv(
    key="DEFAULT_CLUSTER_NAME", default="sql-table-engine"
)
CLUSTER_AUTOTERMINATION_MINUTES: Final[int] = int(
    os.getenv(key="CLUSTER_AUTOTERMINATION_MINUTES", default="10")
)
DATABRICKS_PROFILE: Final[str | None] = os.getenv(key="DATABRICKS_PROFILE") or None
