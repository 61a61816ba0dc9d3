from pyspark.sql import Window
from pyspark.sql.functions import avg, col, desc, lag, max, min, rank

DAY = ("year", "month", "day")


def best_and_worst_delays(flights):
    """Rows holding each day's smallest and largest departure delay."""
    day = Window.partitionBy(*DAY)
    return (flights
            .select(*DAY, "carrier", "flight", "dep_delay")
            .withColumn("min_delay", min("dep_delay").over(day))
            .withColumn("max_delay", max("dep_delay").over(day))
            .filter((col("dep_delay") == col("min_delay"))
                    | (col("dep_delay") == col("max_delay")))
            .drop("min_delay", "max_delay"))


def rank_delays(flights):
    # rank(): ties share a rank and leave a gap after them
    day = Window.partitionBy(*DAY).orderBy(desc("dep_delay"))
    return (flights
            .select(*DAY, "carrier", "flight", "dep_delay")
            .withColumn("rank", rank().over(day)))


def daily_delay_deltas(flights):
    """
    Per carrier and day, in scheduled departure order: the previous
    flight's departure delay and the running mean delay so far.
    """
    ordered = Window.partitionBy("carrier", *DAY) \
        .orderBy("sched_dep_time", "flight")
    running = ordered.rowsBetween(Window.unboundedPreceding, Window.currentRow)
    return (flights
            .select(*DAY, "carrier", "flight", "sched_dep_time", "dep_delay")
            .withColumn("prev_dep_delay", lag("dep_delay").over(ordered))
            .withColumn("running_mean_delay", avg("dep_delay").over(running)))


def demo_windows(flights):
    print("\n=== Window functions ===")

    print("\nBest and worst departure delay of every day:")
    best_and_worst_delays(flights).orderBy(*DAY, "dep_delay").show(6)

    print("\nDelays ranked within each day (1 = worst):")
    rank_delays(flights).filter(col("rank") <= 3).orderBy(*DAY, "rank").show(9)

    print("\nPrevious and running mean delay per carrier and day:")
    daily_delay_deltas(flights).orderBy("carrier", *DAY, "sched_dep_time").show(5)
