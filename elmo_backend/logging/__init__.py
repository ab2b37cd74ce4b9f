import logging
import sys
from typing import Literal

import structlog

LogFormat = Literal["logfmt", "json", "console"]

# reset log level to warning for chatty libraries
QUIET_LOGGERS = ["sqlalchemy.engine", "asyncpg", "fastapi", "uvicorn", "testcontainers"]

# see: https://www.structlog.org/en/stable/standard-library.html
SHARED_PROCESSORS = [
    # ensures that objects returned from get_logger() share context within a given request
    structlog.contextvars.merge_contextvars,
    # If log level is too low, abort pipeline and throw away log entry.
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    # the savers share most of their event names, the function tells them apart
    structlog.processors.CallsiteParameterAdder(
        {structlog.processors.CallsiteParameter.FUNC_NAME}
    ),
]


def _renderer(log_format: LogFormat):
    if log_format == "json":
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    if log_format == "console":
        return [structlog.dev.ConsoleRenderer()]
    return [
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.LogfmtRenderer(
            sort_keys=True,
            key_order=["event", "level", "resource_id", "status_code"],
            bool_as_flag=False,
            drop_missing=True,
        ),
    ]


def configure_logging(level: str = "INFO", log_format: LogFormat = "logfmt") -> None:
    """(Re)configure structlog on top of the standard library logger."""
    logging.basicConfig(format="%(message)s", stream=sys.stdout, force=True)
    logging.getLogger().setLevel(level.upper())
    for module in QUIET_LOGGERS:
        logging.getLogger(module).setLevel(logging.WARNING)

    structlog.configure(
        processors=[*SHARED_PROCESSORS, *_renderer(log_format)],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # loggers bound before the app reads its settings pick up the new config
        cache_logger_on_first_use=False,
    )


configure_logging()
