import pandas as pd
from pyspark.sql.functions import col

from nycflights_spark.config import create_session
from nycflights_spark.tables import AIRLINES_SCHEMA, copy_to


def run_check(spark):
    # A tiny airlines table
    airlines = pd.DataFrame({
        "carrier": ["AA", "B6", "UA"],
        "name": ["American Airlines Inc.", "JetBlue Airways",
                 "United Air Lines Inc."],
    })

    df = copy_to(spark, airlines, "airlines_check", schema=AIRLINES_SCHEMA)
    print("DataFrame created successfully!")

    # A simple transformation: names ending in "Inc."
    df_filtered = df.filter(col("name").endswith("Inc."))

    print("Filtered DataFrame (name ends with 'Inc.'):")
    df_filtered.show(truncate=False)

    return df_filtered.count()


def main():
    spark = create_session("NYCFlights-Check")
    print("Spark session created successfully!")
    try:
        run_check(spark)
    finally:
        spark.stop()
    print("Spark session stopped successfully!")


if __name__ == "__main__":
    main()
