"""
Example 02: Cursor Without a Resource

A cursor that only counts. The loop still releases the state, but there is
nothing to free, so no release message is printed.
"""

import sys

from resource_bound_sequence.demos import run_non_disposable_demo
from resource_bound_sequence.main import run_demo


if __name__ == "__main__":
    sys.exit(run_demo(run_non_disposable_demo, "cursor without a resource"))
