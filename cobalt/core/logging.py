"""structlog configuration shared by every entrypoint."""

import structlog

from cobalt.core.errors import InvalidLogFormatError


def configure_logging(log_format: str = "console") -> None:
    """Configure structlog with a console or JSON renderer.

    Raises:
        InvalidLogFormatError: if log_format is neither 'console' nor 'json'.
    """
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        raise InvalidLogFormatError(log_format=log_format)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )
