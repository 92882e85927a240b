"""Structured JSON logging for client diagnostics"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from mysanvi.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_request(backend: str, method: str, url: str) -> None:
    logging.info(
        "Backend request",
        extra={"backend": backend, "step": "request", "method": method, "url": url},
    )


def log_response(
    backend: str,
    method: str,
    url: str,
    status_code: int,
    duration_ms: float,
    body: str | None = None,
) -> None:
    """Log a completed backend call; the body is only emitted at DEBUG"""
    logging.info(
        "Backend response",
        extra={
            "backend": backend,
            "step": "response",
            "method": method,
            "url": url,
            "status_code": status_code,
            "duration_ms": duration_ms,
        },
    )
    if body is not None:
        logging.debug("Backend response body", extra={"backend": backend, "url": url, "body": body})
