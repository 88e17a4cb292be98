#
# logconfig.py - structlog on top of stdlib logging
#
#
from __future__ import annotations

import logging
import sys
import uuid

import flask
import structlog


def configure_logging(app: flask.Flask) -> None:
    level = logging.getLevelName(app.config.get("LOG_LEVEL", "INFO"))
    if app.config.get("LOG_JSON") and not app.debug:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)


def bind_request_context() -> None:
    """
    Bind request details for every log line emitted while handling it.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=flask.request.headers.get("X-Request-Id") or uuid.uuid4().hex,
        method=flask.request.method,
        path=flask.request.path,
    )


def clear_request_context(exc: BaseException | None = None) -> None:
    structlog.contextvars.clear_contextvars()
