from pyspark.sql.functions import rand


def sample_n(df, n, seed=None):
    """Exactly min(n, rows) random rows."""
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return df.orderBy(rand(seed)).limit(n)


def sample_frac(df, fraction, replace=False, seed=None):
    """
    Random fraction of the rows. The row count is only approximate:
    each row is kept with probability `fraction` (Poisson draws when
    sampling with replacement).
    """
    if fraction < 0 or (not replace and fraction > 1):
        raise ValueError(f"Invalid sampling fraction {fraction} (replace={replace})")
    return df.sample(withReplacement=replace, fraction=fraction, seed=seed)


def demo_sampling(flights):
    print("\n=== Sampling ===")

    print("\nTen random flights:")
    sample_n(flights, 10, seed=42).select("year", "month", "day", "carrier",
                                          "flight", "dep_delay").show()

    print("\nAbout 1% of the flights:")
    print(sample_frac(flights, 0.01, seed=42).count())

    print("\nAbout 1% of the flights, drawn with replacement:")
    print(sample_frac(flights, 0.01, replace=True, seed=42).count())
