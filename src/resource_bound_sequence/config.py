"""Configuration management for the demo programs."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class DemoConfig:
    """Demo configuration parameters."""

    lines_path: Path
    parquet_path: Path
    parquet_batch_size: int
    verbose: bool

    @classmethod
    def from_env(cls) -> "DemoConfig":
        """Load demo configuration from environment variables."""
        return cls(
            lines_path=Path(os.getenv("DEMO_LINES_PATH", "demo_lines.txt")),
            parquet_path=Path(os.getenv("DEMO_PARQUET_PATH", "demo_rows.parquet")),
            parquet_batch_size=int(os.getenv("DEMO_PARQUET_BATCH_SIZE", "2")),
            verbose=os.getenv("DEMO_VERBOSE", "false").lower() == "true",
        )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.parquet_batch_size <= 0:
            raise ValueError("parquet_batch_size must be positive")


def get_demo_config() -> DemoConfig:
    """Get demo configuration."""
    return DemoConfig.from_env()
