"""Logger configuration for the watcher."""

from __future__ import annotations

import sys

from loguru import logger

from .settings import WatcherConfig


def setup_logging(config: WatcherConfig) -> None:
    """Configure loguru logger for console and optional file output.

    Sets up:
    - Console output with colored output at the configured level
    - File output with rotation and retention when a log file is configured
    """

    # Remove default loguru handler
    logger.remove()

    logger.add(
        sink=sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=config.log_level,
        colorize=True,
    )

    if config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            sink=str(config.log_file),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=config.log_level,
            rotation=config.log_rotation,
            retention=config.log_retention,
            compression="gz",
            enqueue=True,  # Thread-safe logging
        )

        logger.info(f"File logging enabled: {config.log_file}")
        logger.info(f"Log level: {config.log_level}")
