import logging
import os
import subprocess
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

from nycflights_spark.config import DATA_DIR, HDFS_DIR, NAMENODE
from nycflights_spark.tables import TABLE_NAMES

logger = logging.getLogger(__name__)


def upload_file(data_dir, file_name, hdfs_dir, namenode=NAMENODE):
    thread_name = threading.current_thread().name
    csv_path = os.path.join(data_dir, file_name)

    if not os.path.exists(csv_path):
        logger.warning("File not found: %s", csv_path)
        return False

    logger.info("Uploading %s (%.1f MB) to HDFS using %s", file_name,
                os.path.getsize(csv_path) / (1024 * 1024), thread_name)

    hdfs_path = f"{hdfs_dir}/{file_name}"

    with open(csv_path, "rb") as f:
        process = subprocess.Popen(
            ["docker", "exec", "-i", namenode, "hdfs", "dfs", "-put",
             "-f", "-", hdfs_path],
            stdin=subprocess.PIPE
        )
        process.communicate(input=f.read())

    if process.returncode != 0:
        logger.error("Upload failed for %s (exit %s)", file_name,
                     process.returncode)
        return False

    logger.info("Finished uploading %s with %s", file_name, thread_name)
    return True


def upload_all(data_dir, hdfs_dir, files, namenode=NAMENODE, max_workers=4):
    logger.info("Cleaning up old files from HDFS directory: %s", hdfs_dir)
    subprocess.run(
        ["docker", "exec", namenode, "hdfs", "dfs", "-rm", "-r", "-f",
         hdfs_dir],
        check=False
    )

    # Recreate the directory (so it always exists)
    subprocess.run(
        ["docker", "exec", namenode, "hdfs", "dfs", "-mkdir", "-p",
         hdfs_dir],
        check=True
    )

    uploaded = []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(upload_file, data_dir, file_name,
                                   hdfs_dir, namenode): file_name
                   for file_name in files}
        for future in as_completed(futures):
            if future.result():
                uploaded.append(futures[future])

    return sorted(uploaded)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    start = time.time()
    csv_files = [f"{name}.csv" for name in TABLE_NAMES]
    uploaded = upload_all(DATA_DIR, HDFS_DIR, csv_files)
    end = time.time()

    print(f"\n{len(uploaded)} of {len(csv_files)} CSV files uploaded to "
          f"HDFS in {end - start} seconds")
