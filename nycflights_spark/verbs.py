"""
Single-table verbs.

Each helper returns a new DataFrame: nothing runs on the cluster until
an action such as show() or count() is called on the result.

    select     -> DataFrame.select
    filter     -> DataFrame.filter
    arrange    -> DataFrame.orderBy
    summarise  -> DataFrame.agg
    mutate     -> DataFrame.withColumn
"""
from pyspark.sql.functions import col, desc, mean, when


def columns_between(df, first, last):
    """Column names from first to last inclusive, like R's year:day."""
    columns = df.columns
    for name in (first, last):
        if name not in columns:
            raise ValueError(f"Column {name!r} not in {columns}")

    start, end = columns.index(first), columns.index(last)
    if start <= end:
        return columns[start:end + 1]
    return columns[end:start + 1][::-1]


def select_delays(flights):
    return flights.select(*columns_between(flights, "year", "day"),
                          "arr_delay", "dep_delay")


def filter_departure_delay(flights, minutes=1000):
    return flights.filter(col("dep_delay") > minutes)


def arrange_by_departure_delay(flights):
    return flights.orderBy(desc("dep_delay"))


def summarise_departure_delay(flights):
    # mean() skips NULLs, the same as na.rm = TRUE
    return flights.agg(mean("dep_delay").alias("mean_dep_delay"))


def mutate_speed(flights):
    # NULL where air_time is missing or zero
    return flights.withColumn(
        "speed",
        when(col("air_time") != 0,
             col("distance") / col("air_time") * 60)
    )


def demo_verbs(flights):
    print("\n=== Single-table verbs ===")

    print("\nselect: year to day, plus the two delay columns")
    select_delays(flights).show(5)

    print("\nfilter: departures delayed by more than 1000 minutes")
    filter_departure_delay(flights).show(5)

    print("\narrange: biggest departure delays first")
    arrange_by_departure_delay(flights).show(5)

    print("\nsummarise: mean departure delay")
    summarise_departure_delay(flights).show()

    print("\nmutate: average speed in miles per hour")
    mutate_speed(flights).select("carrier", "flight", "distance",
                                 "air_time", "speed").show(5)
