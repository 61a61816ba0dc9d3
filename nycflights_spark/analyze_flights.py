import logging
import os
import time

import matplotlib.pyplot as plt
import seaborn as sns
from pyspark.sql.functions import avg, col, count
from scipy import stats

from nycflights_spark.pipelines import carrier_day_steps

logger = logging.getLogger(__name__)


def delay_by_tailnum(flights):
    return (flights
            .groupBy("tailnum")
            .agg(count("*").alias("count"),
                 avg("distance").alias("dist"),
                 avg("arr_delay").alias("delay"))
            .filter((col("count") > 20) & (col("dist") < 2000)
                    & col("delay").isNotNull()))


def compare_air_time(carrierhours, first="UA", second="AA"):
    """
    Welch t-test of air_time_hours between two carriers.
    carrierhours is a collected (pandas) frame.
    """
    samples = []
    for carrier in (first, second):
        hours = carrierhours.loc[carrierhours["carrier"] == carrier,
                                 "air_time_hours"].dropna()
        if len(hours) < 2:
            raise ValueError(f"Need at least two {carrier} flights, got {len(hours)}")
        samples.append(hours)

    result = stats.ttest_ind(samples[0], samples[1], equal_var=False)
    return float(result.statistic), float(result.pvalue)


def plot_delay_vs_distance(pdf, out_path):
    plt.figure(figsize=(10, 6))
    sns.scatterplot(
        data=pdf,
        x="dist",
        y="delay",
        size="count",
        sizes=(5, 60),
        alpha=0.5
    )
    sns.regplot(data=pdf, x="dist", y="delay", scatter=False, order=2)
    plt.title("Mean Arrival Delay by Mean Distance per Plane", fontsize=14)
    plt.xlabel("Mean distance (miles)", fontsize=12)
    plt.ylabel("Mean arrival delay (minutes)", fontsize=12)
    plt.grid(True, axis="y", alpha=0.6)
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()


def plot_air_time_by_carrier(pdf, out_path):
    plt.figure(figsize=(8, 5))
    sns.boxplot(
        data=pdf,
        x="carrier",
        y="air_time_hours"
    )
    plt.title("Air Time on 17 May 2013 by Carrier", fontsize=14)
    plt.xlabel("Carrier", fontsize=12)
    plt.ylabel("Air time (hours)", fontsize=12)
    plt.grid(True, axis="y", linestyle="--", alpha=0.6)
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()


def analyze_flights(spark, flights, output_dir):
    print(f"\n=== Collecting results for local analysis into {output_dir} ===")
    os.makedirs(output_dir, exist_ok=True)
    written = []

    # collect() / toPandas() bring the rows to the driver: keep them small
    delay = delay_by_tailnum(flights).toPandas()
    print(f"\nPlanes with more than 20 flights: {len(delay)}")

    if not delay.empty:
        out_path = os.path.join(output_dir, "output_delay_vs_distance.png")
        plot_delay_vs_distance(delay, out_path)
        written.append(out_path)

    carrierhours = carrier_day_steps(flights).c4.toPandas()
    print("\nAir time on 17 May, UA vs AA")
    try:
        statistic, pvalue = compare_air_time(carrierhours)
        print(f"   t = {statistic:.3f}, p = {pvalue:.4f}")
    except ValueError as e:
        print(f"   skipped: {e}")

    if not carrierhours.empty:
        out_path = os.path.join(output_dir, "output_air_time_by_carrier.png")
        plot_air_time_by_carrier(carrierhours, out_path)
        written.append(out_path)

    print(f"\nResults saved in {output_dir} as PNG files:")
    for path in written:
        print(f"   - {os.path.basename(path)}")
    logger.info("Wrote %d plots to %s", len(written), output_dir)

    return written


if __name__ == "__main__":
    from nycflights_spark.config import DATA_DIR, OUTPUT_DIR, create_session
    from nycflights_spark.tables import read_table_csv

    logging.basicConfig(level=logging.INFO)
    start = time.time()
    spark = create_session("NYCFlights-Analysis")
    try:
        analyze_flights(spark, read_table_csv(spark, DATA_DIR, "flights"),
                        OUTPUT_DIR)
    finally:
        spark.stop()
    end = time.time()
    print(f"\nAnalysis completed in {round(end - start, 2)} seconds.")
