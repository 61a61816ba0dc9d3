import csv
import logging
import os

import pandas as pd
from pyspark.sql.types import IntegralType

from nycflights_spark.config import DATA_DIR, HDFS_DIR
from nycflights_spark.extract_load import upload_all
from nycflights_spark.tables import SCHEMAS, TABLE_NAMES, source_tables

logger = logging.getLogger(__name__)


def _restore_integers(pdf, name):
    # pandas stores NaN-able integer columns as floats ("517.0")
    pdf = pdf.copy()
    for field in SCHEMAS[name].fields:
        if isinstance(field.dataType, IntegralType) and field.name in pdf.columns:
            pdf[field.name] = pdf[field.name].round().astype("Int64")
    return pdf


def _csv_rows(rows):
    return [["" if pd.isna(v) else v for v in row] for row in rows]


def write_csv_chunks(pdf, csv_path, chunk_size=100_000):
    """
    Writes pdf to csv_path chunk by chunk, header first, NaN as empty
    fields. Returns the number of chunks written.
    """
    chunk_idx = 0

    with open(csv_path, "w", newline='', encoding='utf-8') as fout:
        writer = csv.writer(fout, quoting=csv.QUOTE_MINIMAL)
        writer.writerow(list(pdf.columns))

        for start in range(0, len(pdf), chunk_size):
            chunk = pdf.iloc[start:start + chunk_size]
            writer.writerows(_csv_rows(chunk.itertuples(index=False, name=None)))
            chunk_idx += 1

    return chunk_idx


def export_tables(data_dir, names=TABLE_NAMES, chunk_size=100_000,
                  hdfs_dir=None):
    """
    Exports the nycflights13 tables to <data_dir>/<name>.csv. With
    hdfs_dir, the finished files are then uploaded to HDFS.
    """
    os.makedirs(data_dir, exist_ok=True)

    exported = {}
    for name, pdf in source_tables(names).items():
        print(f"\nProcessing {name} ({len(pdf)} rows)...")
        csv_path = os.path.join(data_dir, f"{name}.csv")
        chunks = write_csv_chunks(_restore_integers(pdf, name), csv_path,
                                  chunk_size=chunk_size)
        print(f"Finished {name} ({chunks} chunks written)")
        exported[name] = csv_path

    if hdfs_dir:
        files = [os.path.basename(path) for path in exported.values()]
        uploaded = upload_all(data_dir, hdfs_dir, files)
        if len(uploaded) != len(files):
            logger.warning("Uploaded %d of %d files to %s",
                           len(uploaded), len(files), hdfs_dir)

    return exported


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)

    # Upload the exports to HDFS as well when a namenode container is running
    stage_hdfs = os.environ.get("NYCFLIGHTS_STAGE_HDFS", "0") == "1"

    export_tables(DATA_DIR, hdfs_dir=HDFS_DIR if stage_hdfs else None)

    print(f"\nAll nycflights13 tables exported to {DATA_DIR} successfully!")
