import logging
import os

logger = logging.getLogger(__name__)

FORMATS = ("parquet", "csv", "json")


def _check_format(fmt):
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported format {fmt!r}, expected one of {FORMATS}")


def get_num_workers(spark):
    """
    Detect number of active executors (workers) in the cluster.
    Works in both standalone and YARN mode.
    """
    try:
        sc = spark.sparkContext
        executors = sc._jsc.sc().getExecutorMemoryStatus().keySet().toSeq()
        executor_count = executors.size() - 1  # subtract driver
        return max(1, executor_count)
    except Exception as e:
        logger.warning("Could not detect executors automatically: %s", e)
        return int(spark.conf.get("spark.executor.instances", "1"))


def estimate_partitions(spark, path, target_mb=256, min_partitions=1):
    """
    Estimate number of partitions for even distribution across workers.
    - path: input file or directory (any Hadoop-supported scheme)
    - target_mb: target data size per partition
    - min_partitions: lower bound on the result
    """
    target_size = target_mb * 1024 * 1024  # MB -> bytes
    jvm = spark.sparkContext._jvm
    hadoop_path = jvm.org.apache.hadoop.fs.Path(path)
    fs = hadoop_path.getFileSystem(spark.sparkContext._jsc.hadoopConfiguration())
    total_bytes = fs.getContentSummary(hadoop_path).getLength()

    # Compute partitions based on target partition size
    num_partitions = max(min_partitions, int(total_bytes / target_size))

    # Round to nearest multiple of worker count for even load
    worker_count = get_num_workers(spark)
    if num_partitions % worker_count != 0:
        num_partitions = ((num_partitions // worker_count) + 1) * worker_count

    logger.info("Estimated size of %s: %.2f MB -> %d partitions",
                path, total_bytes / 1024 / 1024, num_partitions)
    return num_partitions


def _writer(df, fmt, mode):
    writer = df.write.mode(mode)
    if fmt == "parquet":
        return writer.option("compression", "snappy")
    if fmt == "csv":
        return writer.option("header", "true")
    return writer


def write_table(df, path, fmt="parquet", mode="overwrite", partitions=None):
    _check_format(fmt)

    if partitions is None:
        _writer(df, fmt, mode).format(fmt).save(path)
        logger.info("Wrote %s to %s", fmt, path)
        return

    try:
        _writer(df.coalesce(partitions), fmt, mode).format(fmt).save(path)
    except Exception as e:
        logger.warning("Write failed: %s, retrying with fewer partitions...", e)
        _writer(df.coalesce(max(1, partitions // 2)), fmt, mode) \
            .format(fmt).save(path)

    logger.info("Wrote %s to %s", fmt, path)


def read_table(spark, path, fmt="parquet", schema=None):
    _check_format(fmt)
    reader = spark.read
    if schema is not None:
        reader = reader.schema(schema)
    if fmt == "csv":
        reader = reader.option("header", "true")
        if schema is None:
            reader = reader.option("inferSchema", "true")
    return reader.format(fmt).load(path)


def demo_io(spark, flights, output_dir):
    print("\n=== Reading and writing data ===")

    sample = flights.select("year", "month", "day", "carrier", "flight",
                            "origin", "dest", "dep_delay", "arr_delay")

    for fmt in FORMATS:
        path = os.path.join(output_dir, f"nycflights13-{fmt}")
        write_table(sample, path, fmt=fmt, partitions=get_num_workers(spark))
        restored = read_table(spark, path, fmt=fmt, schema=sample.schema)
        print(f"{fmt}: wrote and read back {restored.count()} rows from {path}")

    parquet_path = os.path.join(output_dir, "nycflights13-parquet")
    print(f"Partitions suggested for {parquet_path}: "
          f"{estimate_partitions(spark, parquet_path, target_mb=16)}")
