"""Command line entry point: ``python -m activewin_watcher``."""

from __future__ import annotations

import sys

from loguru import logger

from .app import create_watcher
from .config import load_config, setup_logging


def main() -> int:
    """Load configuration and run the watcher until terminated.

    Returns:
        Process exit status (non-zero on fatal errors)
    """
    config = load_config()
    setup_logging(config)

    is_valid, errors = config.validate()
    if not is_valid:
        logger.error(f"Invalid configuration: {errors}")
        return 1

    try:
        watcher = create_watcher(config)
        watcher.run()
    except Exception:
        logger.exception("Fatal watcher error")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
