"""
Two-table verbs.

    left_join(flights, airlines)              -> natural_join(flights, airlines)
    left_join(flights, airlines, by="carrier")  -> join_by(..., by="carrier")
    left_join(x, y, by=c("a" = "b"))           -> join_by(..., by={"a": "b"})
    semi_join / anti_join                      -> how="left_semi" / "left_anti"
"""
from functools import reduce

FILTERING_JOINS = ("left_semi", "semi", "leftsemi", "left_anti", "anti", "leftanti")


def natural_join(left, right, how="left"):
    """Join on every column name the two frames share."""
    common = [c for c in left.columns if c in right.columns]
    if not common:
        raise ValueError("No common columns to join on")
    return left.join(right, on=common, how=how)


def _suffix_shared(left, right, left_keys, right_keys, suffixes):
    shared = [c for c in left.columns if c in right.columns]
    for c in shared:
        if c not in left_keys:
            left = left.withColumnRenamed(c, c + suffixes[0])
        if c not in right_keys:
            right = right.withColumnRenamed(c, c + suffixes[1])
    return left, right


def join_by(left, right, by, how="left", suffixes=("_x", "_y")):
    """
    by is a column name, a list of names, or a {left_name: right_name}
    mapping. Mapped right-side keys are dropped from the result.

    Non-key columns present on both sides get `suffixes` appended, e.g.
    joining flights and planes by tailnum gives year_x and year_y.
    Semi and anti joins keep only left columns and rename nothing.
    """
    if isinstance(by, dict):
        if not by:
            raise ValueError("Empty join mapping")
        left_keys, right_keys = list(by), list(by.values())
    else:
        left_keys = right_keys = [by] if isinstance(by, str) else list(by)

    if how not in FILTERING_JOINS:
        left, right = _suffix_shared(left, right, left_keys, right_keys,
                                     suffixes)

    if not isinstance(by, dict):
        return left.join(right, on=by, how=how)

    condition = reduce(
        lambda acc, cond: acc & cond,
        [left[l_name] == right[r_name] for l_name, r_name in by.items()],
    )
    joined = left.join(right, on=condition, how=how)
    if how in FILTERING_JOINS:
        return joined
    for r_name in by.values():
        joined = joined.drop(right[r_name])
    return joined


def flights_with_airline_names(flights, airlines):
    return join_by(flights, airlines, by="carrier")


def flights_with_known_planes(flights, planes):
    return join_by(flights, planes, by="tailnum", how="left_semi")


def flights_without_planes(flights, planes):
    return join_by(flights, planes, by="tailnum", how="left_anti")


def demo_joins(flights, airlines, planes):
    print("\n=== Joins ===")

    print("\nNatural left join with airlines (shared column: carrier):")
    natural_join(flights, airlines) \
        .select("year", "month", "day", "carrier", "name").show(5)

    print("\nSame join, key named explicitly:")
    flights_with_airline_names(flights, airlines) \
        .select("carrier", "flight", "name").show(5)

    print("\nJoin on differently named keys (carrier = code):")
    codes = airlines.withColumnRenamed("carrier", "code")
    join_by(flights, codes, by={"carrier": "code"}) \
        .select("carrier", "flight", "name").show(5)

    print("\nInner join keeps only flights with a matching airline:")
    print(join_by(flights, airlines, by="carrier", how="inner").count())

    print("\nFlights whose plane has metadata:", flights_with_known_planes(flights, planes).count())
    print("Flights whose plane has no metadata:", flights_without_planes(flights, planes).count())
