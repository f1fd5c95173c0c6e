"""
Example 03: Value-Semantics Cursor

Copies of an immutable producer are independent: each traversal frees its
own resource once. Copies of a cursor share one reference-counted handle,
freed when the last copy is released.
"""

import sys

from resource_bound_sequence.demos import run_value_demo
from resource_bound_sequence.main import run_demo


if __name__ == "__main__":
    sys.exit(run_demo(run_value_demo, "value-semantics cursor"))
