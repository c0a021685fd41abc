import logging

import structlog

from storefront.core.config import settings


def configure_logging(level: str = None) -> None:
    """Configure structlog for the API process.

    Events are rendered as JSON lines; anything below ``LOG_LEVEL`` is dropped.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )
