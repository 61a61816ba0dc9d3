import logging
import os

from pyspark.sql import SparkSession

logger = logging.getLogger(__name__)

DATA_DIR = os.environ.get("NYCFLIGHTS_DATA_DIR", "data")
OUTPUT_DIR = os.environ.get("NYCFLIGHTS_OUTPUT_DIR", "output")
HDFS_DIR = os.environ.get("NYCFLIGHTS_HDFS_DIR", "/user/nycflights13")
NAMENODE = os.environ.get("NYCFLIGHTS_NAMENODE", "namenode")

SPARK_ENVS = ("dev", "test", "prod")


def create_session(app_name=None, master=None, version=None):
    """Connect to a Spark cluster and return the session.

    - app_name: defaults to "NYCFlights-<env>"
    - master: master address, overrides SPARK_MASTER and the env profile
    - version: expected Spark version, e.g. "3.5"; a mismatch is logged
    """
    env = os.environ.get("SPARK_ENV", "dev")
    if env not in SPARK_ENVS:
        raise ValueError(f"Unknown SPARK_ENV {env!r}, expected one of {SPARK_ENVS}")

    master = master or os.environ.get("SPARK_MASTER")
    version = version or os.environ.get("SPARK_VERSION")

    builder = SparkSession.builder.appName(app_name or f"NYCFlights-{env}")

    # Apply environment-specific configs
    if env == "dev":
        builder = builder \
            .master(master or "local[*]") \
            .config("spark.driver.memory", "2g") \
            .config("spark.sql.shuffle.partitions", "10")
    elif env == "test":
        builder = builder \
            .master(master or "yarn") \
            .config("spark.submit.deployMode", "client") \
            .config("spark.executor.instances", "2") \
            .config("spark.executor.memory", "4g")
    elif env == "prod":
        builder = builder \
            .master(master or "yarn") \
            .config("spark.submit.deployMode", "cluster") \
            .config("spark.executor.instances", "5") \
            .config("spark.executor.memory", "8g")

    spark = builder \
        .config("spark.eventLog.enabled", "false") \
        .getOrCreate()
    spark.sparkContext.setLogLevel("WARN")

    logger.info("Spark session created for %s (master=%s, Spark %s)",
                env, spark.sparkContext.master, spark.version)
    if version and not spark.version.startswith(str(version)):
        logger.warning("Requested Spark %s but the session runs Spark %s",
                       version, spark.version)

    return spark
