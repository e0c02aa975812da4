import sys

from loguru import logger

from config.settings import settings


def configure_logging(level: str | None = None) -> None:
    """
    Replace loguru's default sink with a single stderr sink at the configured level.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or settings.LOG_LEVEL).upper(),
        backtrace=False,
        diagnose=settings.ENVIRONMENT != "production",
    )
