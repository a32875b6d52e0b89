import logging

import pytest
from pyspark.sql import SparkSession

# Name of the fixture that requires a local Spark session
_SPARK_FIXTURE_NAME = "spark_fixture"


@pytest.fixture(scope="session")
def spark_fixture():
    logging.getLogger("py4j").setLevel(logging.WARN)

    spark = (
        SparkSession.Builder()
        .appName("sql-table-engine tests")
        # Statements only, no data: one core is plenty.
        .master("local[1]")
        .config("spark.sql.shuffle.partitions", "1")
        .config("spark.ui.enabled", "false")
        .config("spark.ui.showConsoleProgress", "false")
        .config("spark.driver.memory", "1g")
        .getOrCreate()
    )

    yield spark

    spark.stop()


def pytest_addoption(parser: pytest.Parser):
    parser.addoption(
        "--include-spark-tests",
        action="store_true",
        default=False,
        help="Run tests that need a local SparkSession.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """Mark Spark tests and skip them unless --include-spark-tests is given."""
    if config.getoption("--include-spark-tests"):
        return
    skip_spark = pytest.mark.skip(reason="Skipped tests that require a SparkSession")
    for item in items:
        if _SPARK_FIXTURE_NAME in getattr(item, "fixturenames", ()):
            item.add_marker(pytest.mark.requires_spark)
            item.add_marker(skip_spark)
