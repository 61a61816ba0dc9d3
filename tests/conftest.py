import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest
from pyspark.sql import SparkSession

from nycflights_spark.tables import (AIRLINES_SCHEMA, FLIGHTS_SCHEMA,
                                     PLANES_SCHEMA, copy_to)

NAN = float("nan")

FLIGHT_COLUMNS = [
    "year", "month", "day", "dep_time", "sched_dep_time", "dep_delay",
    "arr_time", "sched_arr_time", "arr_delay", "carrier", "flight",
    "tailnum", "origin", "dest", "air_time", "distance", "hour", "minute",
    "time_hour",
]

# A handful of nycflights13-shaped rows: seven on 17 May, three on 1 Jan
FLIGHT_ROWS = [
    (2013, 5, 17, 600, 600, 0.0, 900, 905, -5.0, "UA", 1, "N1", "EWR", "IAH", 180.0, 1400.0, 6, 0, "2013-05-17 06:00:00"),
    (2013, 5, 17, 700, 650, 10.0, 1000, 950, 10.0, "AA", 2, "N2", "JFK", "MIA", 150.0, 1089.0, 6, 50, "2013-05-17 06:00:00"),
    (2013, 5, 17, 800, 800, 0.0, 1100, 1100, 0.0, "AA", 3, "N2", "JFK", "MIA", 160.0, 1089.0, 8, 0, "2013-05-17 08:00:00"),
    (2013, 5, 17, 900, 830, 30.0, 1030, 1000, 30.0, "DL", 4, "N3", "LGA", "ATL", 120.0, 762.0, 8, 30, "2013-05-17 08:00:00"),
    (2013, 5, 17, 958, 1000, -2.0, 1100, 1105, -5.0, "WN", 5, "N4", "LGA", "MDW", 60.0, 725.0, 10, 0, "2013-05-17 10:00:00"),
    (2013, 5, 17, 1105, 1100, 5.0, 1430, 1420, 10.0, "UA", 6, "N1", "EWR", "SFO", 200.0, 2565.0, 11, 0, "2013-05-17 11:00:00"),
    (2013, 5, 17, 0, 1200, 1200.0, 300, 1400, 1180.0, "B6", 7, "N5", "JFK", "BOS", 100.0, 187.0, 12, 0, "2013-05-17 12:00:00"),
    (2013, 1, 1, 517, 515, 2.0, 830, 819, 11.0, "UA", 1545, "N14228", "EWR", "IAH", 227.0, 1400.0, 5, 15, "2013-01-01 05:00:00"),
    (2013, 1, 1, NAN, 600, NAN, NAN, 800, NAN, "AA", 11, None, "JFK", "ORD", NAN, 740.0, 6, 0, "2013-01-01 06:00:00"),
    (2013, 1, 1, 2240, 1930, 1010.0, 2350, 2100, 1010.0, "MQ", 12, "N6", "LGA", "DCA", 0.0, 214.0, 19, 30, "2013-01-01 19:00:00"),
]


@pytest.fixture(scope="session")
def spark():
    session = (SparkSession.builder
               .appName("nycflights-tests")
               .master("local[1]")
               .config("spark.sql.shuffle.partitions", "1")
               .config("spark.ui.enabled", "false")
               .config("spark.eventLog.enabled", "false")
               .getOrCreate())
    session.sparkContext.setLogLevel("WARN")
    yield session
    session.stop()


@pytest.fixture(scope="session")
def flights_pdf():
    return pd.DataFrame(FLIGHT_ROWS, columns=FLIGHT_COLUMNS)


@pytest.fixture(scope="session")
def flights(spark, flights_pdf):
    return copy_to(spark, flights_pdf, "flights", schema=FLIGHTS_SCHEMA)


@pytest.fixture(scope="session")
def airlines(spark):
    pdf = pd.DataFrame({
        "carrier": ["AA", "B6", "DL", "UA", "WN"],
        "name": ["American Airlines Inc.", "JetBlue Airways",
                 "Delta Air Lines Inc.", "United Air Lines Inc.",
                 "Southwest Airlines Co."],
    })
    return copy_to(spark, pdf, "airlines", schema=AIRLINES_SCHEMA)


@pytest.fixture(scope="session")
def planes(spark):
    pdf = pd.DataFrame({
        "tailnum": ["N1", "N2", "N3"],
        "year": [2004, 1998, NAN],
        "type": ["Fixed wing multi engine"] * 3,
        "manufacturer": ["BOEING", "AIRBUS", "EMBRAER"],
        "model": ["737-824", "A320-214", "EMB-145XR"],
        "engines": [2, 2, 2],
        "seats": [149, 182, 55],
        "speed": [NAN, NAN, NAN],
        "engine": ["Turbo-fan"] * 3,
    })
    return copy_to(spark, pdf, "planes", schema=PLANES_SCHEMA)
