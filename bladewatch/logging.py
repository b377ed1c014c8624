"""
Structured Logging
==================

structlog setup for Bladewatch.

Every record, whether emitted through ``get_logger`` or through a plain
``logging.getLogger(__name__)``, is rendered by the same processor chain
and carries:

    - service / version
    - correlation_id of the HTTP request being served, if any
    - ISO timestamp, level and logger name

Author: Bladewatch Team
Version: 1.0.0
"""

import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog


CORRELATION_HEADER = "x-correlation-id"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind a correlation ID to the current context and return it."""
    cid = correlation_id or uuid.uuid4().hex[:12]
    _correlation_id.set(cid)
    return cid


def _add_correlation_id(logger: Any, method_name: str, event_dict: Dict) -> Dict:
    cid = _correlation_id.get()
    if cid:
        event_dict.setdefault("correlation_id", cid)
    return event_dict


def _service_info(service: str, version: str):
    def processor(logger: Any, method_name: str, event_dict: Dict) -> Dict:
        event_dict["service"] = service
        event_dict["version"] = version
        return event_dict
    return processor


def setup_logging(
    level: str = "INFO",
    json_output: bool = True,
    log_file: Optional[str] = None,
    service: str = "bladewatch",
    version: str = "1.0.0",
) -> None:
    """
    Route stdlib and structlog records through one renderer.

    Args:
        level: Root log level name
        json_output: JSON lines when True, colored console output otherwise
        log_file: Also write records to this path
        service: Value of the ``service`` field
        version: Value of the ``version`` field
    """
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_correlation_id,
        _service_info(service, version),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=pre_chain,
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Request lines come from RequestLoggingMiddleware instead.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Structured logger that accepts key/value fields."""
    return structlog.get_logger(name)


class RequestLoggingMiddleware:
    """
    ASGI middleware logging one ``request_completed`` line per HTTP request.

    Fields: method, path, status, duration_ms, streamed. The request's
    X-Correlation-ID is reused (or generated) and echoed on the response.
    Event-stream responses are logged once the client disconnects, with
    ``streamed=True``.
    """

    def __init__(self, app: Any):
        self.app = app
        self.logger = get_logger("bladewatch.api.requests")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = dict(scope.get("headers") or []).get(CORRELATION_HEADER.encode(), b"")
        cid = set_correlation_id(incoming.decode("latin-1") or None)

        started = time.perf_counter()
        status_code = 500
        streamed = False

        async def send_wrapper(message):
            nonlocal status_code, streamed
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                streamed = any(
                    name.lower() == b"content-type" and value.startswith(b"text/event-stream")
                    for name, value in headers
                )
                headers.append((CORRELATION_HEADER.encode(), cid.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            self.logger.info(
                "request_completed",
                method=scope.get("method", ""),
                path=scope.get("path", ""),
                status=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                streamed=streamed,
            )
