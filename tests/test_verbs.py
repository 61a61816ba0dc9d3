import pytest
from pyspark.sql.functions import lit

from nycflights_spark.verbs import (arrange_by_departure_delay,
                                    columns_between, filter_departure_delay,
                                    mutate_speed, select_delays,
                                    summarise_departure_delay)


def test_columns_between_is_inclusive(flights):
    assert columns_between(flights, "year", "day") == ["year", "month", "day"]


def test_columns_between_reversed(flights):
    assert columns_between(flights, "day", "year") == ["day", "month", "year"]


def test_columns_between_unknown_column(flights):
    with pytest.raises(ValueError):
        columns_between(flights, "year", "no_such_column")


def test_select_delays_columns(flights):
    assert select_delays(flights).columns == [
        "year", "month", "day", "arr_delay", "dep_delay"]


def test_filter_departure_delay(flights):
    rows = filter_departure_delay(flights).collect()
    assert sorted(r.flight for r in rows) == [7, 12]


def test_filter_departure_delay_threshold(flights):
    assert filter_departure_delay(flights, minutes=20).count() == 3


def test_arrange_puts_largest_delay_first(flights):
    first = arrange_by_departure_delay(flights).first()
    assert first.dep_delay == 1200.0


def test_summarise_ignores_nulls(flights):
    row = summarise_departure_delay(flights).collect()
    assert len(row) == 1
    assert row[0].mean_dep_delay == pytest.approx(2255.0 / 9)


def test_mutate_speed(flights):
    speeds = {r.flight: r.speed
              for r in mutate_speed(flights).select("flight", "speed").collect()}
    assert speeds[1] == pytest.approx(1400.0 / 180.0 * 60)
    # air_time missing or zero
    assert speeds[11] is None
    assert speeds[12] is None


def test_verbs_are_lazy(flights):
    # Building the chain must not change the source frame
    derived = mutate_speed(filter_departure_delay(flights))
    assert "speed" in derived.columns
    assert "speed" not in flights.columns


def test_mutate_speed_keeps_sign_of_negative_air_time(flights):
    bad_row = flights.filter("flight = 1").withColumn("air_time", lit(-60.0))
    assert mutate_speed(bad_row).first().speed == pytest.approx(-1400.0)
