"""
Example 05: Parquet Row Reader

Streams rows out of a Parquet file one record batch at a time and stops
early. Stopping early still closes the file.
"""

import sys

from resource_bound_sequence.config import get_demo_config
from resource_bound_sequence.demos import run_parquet_demo
from resource_bound_sequence.main import run_demo


if __name__ == "__main__":
    config = get_demo_config()
    sys.exit(
        run_demo(
            lambda: run_parquet_demo(config.parquet_path, batch_size=config.parquet_batch_size),
            "parquet row reader",
        )
    )
