"""Environment-driven settings for ScreenRank."""

import os

from screenrank.elo_ranker.models import RankerConfig
from screenrank.logging import configure_logging

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# Human-readable logs instead of JSON
LOG_CONSOLE = os.environ.get("SCREENRANK_LOG_CONSOLE", "").lower() == "true"

# Directory used by JsonFileStore
DATA_DIR = os.environ.get("SCREENRANK_DATA_DIR", "data")


def setup_logging() -> None:
    """Configure structlog from LOG_LEVEL and SCREENRANK_LOG_CONSOLE."""
    configure_logging(console=LOG_CONSOLE, log_level=LOG_LEVEL)


def ranker_config_from_env() -> RankerConfig:
    """Build the engine configuration from the current environment."""
    return RankerConfig(top_n=int(os.environ.get("SCREENRANK_TOP_N", "5")))


def shuffle_seed_from_env() -> int | None:
    """Fixed seed for round-robin shuffles, if one is configured."""
    seed = os.environ.get("SCREENRANK_SEED", "").strip()
    return int(seed) if seed else None
