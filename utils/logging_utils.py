import logging

import structlog
from structlog.stdlib import add_log_level, add_logger_name


def setup_logging(level: int | str = logging.INFO, colors: bool = True) -> None:
    """Configure structlog and standard logging for the simulation.

    ``level`` accepts either a ``logging`` constant or its name ("DEBUG").
    Per-tick decisions log at debug, episode boundaries at info.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level!r}")
    logging.basicConfig(level=level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
