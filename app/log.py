"""Logging configuration (loguru)."""

import sys

from loguru import logger

from app.config import settings


def setup_logging(level: str | None = None) -> None:
    """Replace loguru's default handler with the service format."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or settings.log_level).upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )
    logger.info(f"Logging configured with level: {level or settings.log_level}")
