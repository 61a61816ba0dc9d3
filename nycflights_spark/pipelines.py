"""
Laziness, chaining and grouping.

Chaining transformations only builds a logical plan; Catalyst optimizes
the whole chain when an action finally asks for rows. That is why the
four-step build below and the one-expression pipeline run the same job.
"""
import contextlib
import io
import logging
from collections import namedtuple

from pyspark.sql.functions import col, count, mean

logger = logging.getLogger(__name__)

EXPLAIN_MODES = ("simple", "extended", "codegen", "cost", "formatted")

CARRIERS = ("UA", "WN", "AA", "DL")

CarrierDaySteps = namedtuple("CarrierDaySteps", ["c1", "c2", "c3", "c4"])


def _on_17_may(df):
    return df.filter((col("day") == 17) & (col("month") == 5)
                     & col("carrier").isin(*CARRIERS))


def _with_air_time_hours(df):
    return df.withColumn("air_time_hours", col("air_time") / 60)


def carrier_day_steps(flights):
    """Build the 17 May carrier query one step at a time. Runs no job."""
    c1 = _on_17_may(flights)
    c2 = c1.select("year", "month", "day", "carrier", "dep_delay",
                   "air_time", "distance")
    c3 = c2.orderBy("year", "month", "day", "carrier")
    c4 = _with_air_time_hours(c3)
    return CarrierDaySteps(c1, c2, c3, c4)


def carrier_day_pipeline(flights):
    """The same query as carrier_day_steps, written as one chain."""
    return (flights
            .transform(_on_17_may)
            .select("year", "month", "day", "carrier", "dep_delay",
                    "air_time", "distance")
            .orderBy("year", "month", "day", "carrier")
            .transform(_with_air_time_hours))


def carrier_delay_summary(df):
    return (df.groupBy("carrier")
            .agg(count("*").alias("count"),
                 mean("dep_delay").alias("mean_dep_delay"))
            .orderBy("carrier"))


def carrier_delay_summary_sql(spark, view):
    return spark.sql(f"""
        SELECT carrier,
               COUNT(*) AS count,
               AVG(dep_delay) AS mean_dep_delay
        FROM {view}
        GROUP BY carrier
        ORDER BY carrier
    """)


def compute(df, name):
    """
    Materialize a deferred DataFrame: cache it, register it as a view and
    force the evaluation. Later queries on the view read the cached rows.
    """
    cached = df.cache()
    cached.createOrReplaceTempView(name)
    rows = cached.count()
    logger.info("Computed %s (%d rows cached)", name, rows)
    return cached


def render_plan(df, mode="extended"):
    """Return the plan text Spark generates for a deferred DataFrame."""
    if mode not in EXPLAIN_MODES:
        raise ValueError(f"Unknown explain mode {mode!r}, expected one of {EXPLAIN_MODES}")

    buffer = io.StringIO()
    with contextlib.redirect_stdout(buffer):
        df.explain(mode=mode)
    return buffer.getvalue()


def demo_pipelines(spark, flights):
    print("\n=== Laziness and chaining ===")

    steps = carrier_day_steps(flights)
    print("\nFour transformations built, no job has run yet. The plan for c4:")
    print(render_plan(steps.c4, mode="simple"))

    print("Forcing c4 with show():")
    steps.c4.show(5)

    rows = steps.c4.collect()
    print(f"collect() brought {len(rows)} rows to the driver, e.g. {rows[0] if rows else None}")

    print("\nThe same query written as one chain:")
    carrier_day_pipeline(flights).show(5)

    print("\n=== Grouping ===")
    c4 = compute(steps.c4, "c4")
    carrier_delay_summary(c4).show()

    print("\nThe same summary written in SQL against the cached view:")
    carrier_delay_summary_sql(spark, "c4").show()

    print("\nOptimized plan of the grouped query:")
    print(render_plan(carrier_delay_summary(c4), mode="extended"))

    return c4
