"""Main entry point running the release demonstrations."""

import logging
import sys
from typing import Callable, List, Tuple

from .config import get_demo_config
from .demos import (
    run_disposable_demo,
    run_line_reader_demo,
    run_non_disposable_demo,
    run_parquet_demo,
    run_value_demo,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

Demo = Callable[[], int]


def setup_logging(verbose: bool = False):
    """Configure logging level.

    Args:
        verbose: Enable verbose logging
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)


def run_demo(demo: Demo, title: str = "demo") -> int:
    """Run a single demo, turning unhandled errors into an exit code.

    Args:
        demo: Demo function returning an exit code
        title: Name used in diagnostics

    Returns:
        The demo's exit code, 130 on interrupt, 1 on any other error
    """
    try:
        return demo()
    except KeyboardInterrupt:
        logger.warning("\nExecution interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"\nError during {title}: {e}", exc_info=True)
        return 1


def build_demos() -> List[Tuple[str, Demo]]:
    """Create the demo list from configuration."""
    config = get_demo_config()
    setup_logging(config.verbose)

    return [
        ("Disposable cursor", run_disposable_demo),
        ("Cursor without a resource", run_non_disposable_demo),
        ("Value-semantics cursor", run_value_demo),
        ("Line reader", lambda: run_line_reader_demo(config.lines_path)),
        (
            "Parquet row reader",
            lambda: run_parquet_demo(config.parquet_path, batch_size=config.parquet_batch_size),
        ),
    ]


def main() -> int:
    """Main execution function."""
    logger.info("Starting resource release demos")

    try:
        demos = build_demos()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    failures = 0
    for title, demo in demos:
        print("\n" + "=" * 80)
        print(title.upper())
        print("=" * 80)
        exit_code = run_demo(demo, title)
        if exit_code == 130:
            return exit_code
        if exit_code != 0:
            failures += 1

    if failures:
        logger.error(f"{failures} demo(s) failed")
        return 1

    logger.info("All demos completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
