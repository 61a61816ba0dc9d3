"""dplyr-style data manipulation on Spark DataFrames, walked through on nycflights13."""
