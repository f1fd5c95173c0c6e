"""
Example 04: Line Reader

Writes demo_lines.txt, reads it line by line with for_each and then deletes
it. The delete only succeeds everywhere if the file handle was closed.
"""

import sys

from resource_bound_sequence.config import get_demo_config
from resource_bound_sequence.demos import run_line_reader_demo
from resource_bound_sequence.main import run_demo


if __name__ == "__main__":
    config = get_demo_config()
    sys.exit(run_demo(lambda: run_line_reader_demo(config.lines_path), "line reader"))
