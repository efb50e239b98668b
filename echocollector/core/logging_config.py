"""
Centralized logging configuration.
"""

import logging
import sys
from typing import Optional

from echocollector.core.config import Config

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(config: Optional[Config] = None) -> None:
    """
    Configure the root logger once per process.

    Args:
        config: Config instance; INFO level when None
    """
    level_name = config.log_level if config else "INFO"
    level = getattr(logging, level_name.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
