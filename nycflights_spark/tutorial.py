"""
Runs every section of the tutorial in order:

    python prepare_data.py          # export nycflights13 to ./data (optional)
    python -m nycflights_spark.tutorial

Without the CSV exports the tables are copied straight from pandas,
which is slower for flights (336,776 rows) but needs no preparation.
"""
import logging
import os
import time

from nycflights_spark.analyze_flights import analyze_flights
from nycflights_spark.builtin_functions import demo_builtin_functions
from nycflights_spark.config import DATA_DIR, OUTPUT_DIR, create_session
from nycflights_spark.io_formats import demo_io
from nycflights_spark.joins import demo_joins
from nycflights_spark.pipelines import demo_pipelines
from nycflights_spark.sampling import demo_sampling
from nycflights_spark.tables import TABLE_NAMES, copy_dataset, load_tables
from nycflights_spark.verbs import demo_verbs
from nycflights_spark.windows import demo_windows

logger = logging.getLogger(__name__)


def _exports_present(data_dir):
    return all(os.path.exists(os.path.join(data_dir, f"{name}.csv"))
               for name in TABLE_NAMES)


def run_tutorial(data_dir=DATA_DIR, output_dir=OUTPUT_DIR, spark=None):
    start = time.time()
    owns_session = spark is None
    if owns_session:
        spark = create_session("NYCFlights-Tutorial")

    try:
        if _exports_present(data_dir):
            print(f"Reading the nycflights13 exports from {data_dir}")
            tables = load_tables(spark, data_dir)
        else:
            print("No exports found, copying nycflights13 from pandas")
            tables = copy_dataset(spark)

        flights = tables["flights"]
        print("\nThe flights table:")
        flights.printSchema()

        demo_verbs(flights)
        demo_pipelines(spark, flights)
        demo_windows(flights)
        demo_joins(flights, tables["airlines"], tables["planes"])
        demo_sampling(flights)
        demo_builtin_functions(flights)
        demo_io(spark, flights, output_dir)
        written = analyze_flights(spark, flights, output_dir)
    finally:
        if owns_session:
            spark.stop()

    end = time.time()
    print(f"\nTutorial completed in {round(end - start, 2)} seconds.")
    return written


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_tutorial()
