"""
Structured logging.

structlog renders JSON lines through the stdlib logging module. Each
request binds a correlation id so the log lines of one request (including
both halves of a move) can be grouped.
"""

import logging
from uuid import UUID, uuid4

import structlog


structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output to stderr at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level, logging.INFO))
    logging.getLogger().setLevel(getattr(logging, level, logging.INFO))


def get_logger(name: str = "monthly_ledger") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for one inbound request.
    
    Bind it with `bind_request_context` before calling into the core.
    """
    return uuid4()


def bind_request_context(correlation_id: UUID, action: str) -> None:
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        correlation_id=str(correlation_id),
        action=action,
    )


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
