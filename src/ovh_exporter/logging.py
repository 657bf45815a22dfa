import logging

import structlog

LOG_FORMATS = ("console", "logfmt", "json")


def _renderer(fmt: "str") -> "structlog.typing.Processor":
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    if fmt == "logfmt":
        return structlog.processors.LogfmtRenderer(
            key_order=["timestamp", "level", "event"],
            drop_missing=True,
        )
    return structlog.dev.ConsoleRenderer()


def build_processors(fmt: "str" = "console") -> "list[structlog.typing.Processor]":
    """
    returns the processor chain ending with the renderer of the
    given format. Machine readable formats render tracebacks
    as a string field instead of the console's pretty print.
    """
    if fmt not in LOG_FORMATS:
        raise ValueError(f"unknown log format {fmt!r}")

    processors: "list[structlog.typing.Processor]" = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if fmt != "console":
        processors.append(structlog.processors.format_exc_info)
    processors.append(_renderer(fmt))
    return processors


def setup_logging(level: "str", fmt: "str" = "console") -> "None":
    """
    maps string log level to logging module levels and configures
    structlog with the renderer matching fmt and timestamping.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
    )
    structlog.configure(
        processors=build_processors(fmt),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
