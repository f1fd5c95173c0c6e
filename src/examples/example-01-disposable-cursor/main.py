"""
Example 01: Disposable Cursor

A cursor that owns a memory buffer. for_each releases it when the loop
ends, exactly like a hand-written while loop with try/finally.
"""

import sys

from resource_bound_sequence.demos import run_disposable_demo
from resource_bound_sequence.main import run_demo


if __name__ == "__main__":
    sys.exit(run_demo(run_disposable_demo, "disposable cursor"))
