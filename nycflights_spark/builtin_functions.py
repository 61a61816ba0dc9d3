"""
Spark SQL built-ins used from the DataFrame API.

Functions with no DataFrame wrapper (percentile_approx in older Spark
releases, most Hive functions) stay reachable through expr().
"""
from pyspark.sql.functions import (col, current_date, datediff, desc, expr,
                                   make_date)


def days_since_flight(flights):
    return (flights
            .withColumn("flight_date",
                        make_date("year", "month", "day"))
            .withColumn("days_since", datediff(current_date(), col("flight_date")))
            .groupBy("flight_date", "days_since")
            .count()
            .orderBy(desc("days_since")))


def _quantile_label(p):
    # 0.25 -> p25_dep_delay, 0.501 -> p50_1_dep_delay
    return "p" + f"{p * 100:g}".replace(".", "_") + "_dep_delay"


def delay_quantiles(flights, probabilities=(0.25, 0.5, 0.75)):
    labels = [_quantile_label(p) for p in probabilities]
    if len(set(labels)) != len(labels):
        raise ValueError(f"Duplicate probabilities in {probabilities}")

    aggs = [
        expr(f"percentile_approx(dep_delay, {p})").alias(label)
        for p, label in zip(probabilities, labels)
    ]
    return flights.groupBy("origin").agg(*aggs).orderBy("origin")


def demo_builtin_functions(flights):
    print("\n=== Built-in SQL functions ===")

    print("\nDays since each flight date (datediff, current_date):")
    days_since_flight(flights).show(5)

    print("\nDeparture delay quartiles per origin (percentile_approx):")
    delay_quantiles(flights).show()
