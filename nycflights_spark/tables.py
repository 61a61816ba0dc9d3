import logging
import os

import numpy as np
import pandas as pd
from pyspark.sql.functions import coalesce, col, lit, try_to_timestamp
from pyspark.sql.types import (StructType, StructField, IntegerType,
                               DoubleType, StringType, TimestampType,
                               IntegralType)

logger = logging.getLogger(__name__)

TABLE_NAMES = ("flights", "airlines", "airports", "planes", "weather")

# time_hour is exported as text; the first format that parses wins
TIMESTAMP_FORMATS = (
    "yyyy-MM-dd HH:mm:ssXXX",
    "yyyy-MM-dd HH:mm:ss",
    "yyyy-MM-dd'T'HH:mm:ssXXX",
    "yyyy-MM-dd'T'HH:mm:ss",
    "MM/dd/yyyy HH:mm:ss",
)

FLIGHTS_SCHEMA = StructType([
    StructField("year", IntegerType(), True),
    StructField("month", IntegerType(), True),
    StructField("day", IntegerType(), True),
    StructField("dep_time", IntegerType(), True),
    StructField("sched_dep_time", IntegerType(), True),
    StructField("dep_delay", DoubleType(), True),
    StructField("arr_time", IntegerType(), True),
    StructField("sched_arr_time", IntegerType(), True),
    StructField("arr_delay", DoubleType(), True),
    StructField("carrier", StringType(), True),
    StructField("flight", IntegerType(), True),
    StructField("tailnum", StringType(), True),
    StructField("origin", StringType(), True),
    StructField("dest", StringType(), True),
    StructField("air_time", DoubleType(), True),
    StructField("distance", DoubleType(), True),
    StructField("hour", IntegerType(), True),
    StructField("minute", IntegerType(), True),
    StructField("time_hour", TimestampType(), True),
])

AIRLINES_SCHEMA = StructType([
    StructField("carrier", StringType(), True),
    StructField("name", StringType(), True),
])

AIRPORTS_SCHEMA = StructType([
    StructField("faa", StringType(), True),
    StructField("name", StringType(), True),
    StructField("lat", DoubleType(), True),
    StructField("lon", DoubleType(), True),
    StructField("alt", IntegerType(), True),
    StructField("tz", DoubleType(), True),
    StructField("dst", StringType(), True),
    StructField("tzone", StringType(), True),
])

PLANES_SCHEMA = StructType([
    StructField("tailnum", StringType(), True),
    StructField("year", IntegerType(), True),
    StructField("type", StringType(), True),
    StructField("manufacturer", StringType(), True),
    StructField("model", StringType(), True),
    StructField("engines", IntegerType(), True),
    StructField("seats", IntegerType(), True),
    StructField("speed", IntegerType(), True),
    StructField("engine", StringType(), True),
])

WEATHER_SCHEMA = StructType([
    StructField("origin", StringType(), True),
    StructField("year", IntegerType(), True),
    StructField("month", IntegerType(), True),
    StructField("day", IntegerType(), True),
    StructField("hour", IntegerType(), True),
    StructField("temp", DoubleType(), True),
    StructField("dewp", DoubleType(), True),
    StructField("humid", DoubleType(), True),
    StructField("wind_dir", DoubleType(), True),
    StructField("wind_speed", DoubleType(), True),
    StructField("wind_gust", DoubleType(), True),
    StructField("precip", DoubleType(), True),
    StructField("pressure", DoubleType(), True),
    StructField("visib", DoubleType(), True),
    StructField("time_hour", TimestampType(), True),
])

SCHEMAS = {
    "flights": FLIGHTS_SCHEMA,
    "airlines": AIRLINES_SCHEMA,
    "airports": AIRPORTS_SCHEMA,
    "planes": PLANES_SCHEMA,
    "weather": WEATHER_SCHEMA,
}


def _python_value(value, data_type=None):
    if value is None or (not isinstance(value, (list, tuple)) and pd.isna(value)):
        return None
    if isinstance(data_type, IntegralType):
        return int(value)
    if isinstance(data_type, DoubleType):
        return float(value)
    if isinstance(data_type, TimestampType):
        return pd.Timestamp(value).to_pydatetime()
    if isinstance(data_type, StringType):
        return str(value)
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.generic):
        return value.item()
    return value


def copy_to(spark, pdf, name, schema=None):
    """
    Copy a local pandas table to the cluster and register it as a view.
    NaN/NaT become NULL; with a schema, values are coerced to its types.
    """
    if schema is not None:
        types = [field.dataType for field in schema.fields]
        pdf = pdf[schema.fieldNames()]
    else:
        types = [None] * len(pdf.columns)

    records = [
        tuple(_python_value(value, data_type)
              for value, data_type in zip(row, types))
        for row in pdf.itertuples(index=False, name=None)
    ]

    df = spark.createDataFrame(records, schema=schema or list(pdf.columns))
    df.createOrReplaceTempView(name)
    logger.info("Copied %d rows to view %s", len(records), name)
    return df


def source_tables(names=TABLE_NAMES):
    """pandas frames for the requested nycflights13 tables."""
    import nycflights13

    return {name: getattr(nycflights13, name) for name in names}


def copy_dataset(spark, names=TABLE_NAMES):
    """Copy the nycflights13 tables straight from pandas to the cluster."""
    return {name: copy_to(spark, pdf, name, schema=SCHEMAS[name])
            for name, pdf in source_tables(names).items()}


def read_table_csv(spark, data_dir, name):
    """
    Reads <data_dir>/<name>.csv with the table's schema.
    """
    csv_path = os.path.join(data_dir, f"{name}.csv")
    if "://" not in csv_path and not os.path.exists(csv_path):
        raise FileNotFoundError(f"Missing export for table {name}: {csv_path}")

    schema = SCHEMAS[name]
    timestamp_cols = [f.name for f in schema.fields
                      if isinstance(f.dataType, TimestampType)]

    # Timestamps are read as text and parsed below
    read_schema = StructType([
        StructField(f.name, StringType(), True) if f.name in timestamp_cols
        else f
        for f in schema.fields
    ])

    read_opts = {
        "header": "true",
        "mode": "PERMISSIVE",
    }

    df = spark.read.schema(read_schema).options(**read_opts).csv(csv_path)

    for c in timestamp_cols:
        df = df.withColumn(
            c,
            coalesce(*[try_to_timestamp(col(c), lit(fmt))
                       for fmt in TIMESTAMP_FORMATS])
        )

    return df


def load_tables(spark, data_dir, names=TABLE_NAMES):
    tables = {}
    for name in names:
        df = read_table_csv(spark, data_dir, name)
        df.createOrReplaceTempView(name)
        tables[name] = df
        logger.info("Registered view %s from %s", name, data_dir)
    return tables
