"""Structured logging configuration."""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from parts_admin.config import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structured logging for the application."""
    settings = settings or get_settings()

    # Configure standard library logging
    log_level = getattr(logging, settings.log_level)

    if settings.log_format == "json":
        # JSON logging for production
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter(
            fmt="%(timestamp)s %(level)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
        handler.setFormatter(formatter)
    else:
        # Human-readable logging for development
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # httpx logs every Order Store request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class AuditLogger:
    """Specialized logger for order status changes and store calls."""

    def __init__(self, component: str):
        self.component = component
        self.logger = get_logger(component)

    def log_status_change(
        self,
        order_id: str,
        from_status: str,
        to_status: str,
        actor: str,
        **kwargs: Any,
    ) -> None:
        """Log an accepted status change."""
        self.logger.info(
            "status_updated",
            component=self.component,
            order_id=order_id,
            from_status=from_status,
            to_status=to_status,
            actor=actor,
            **kwargs,
        )

    def log_rejected_change(
        self,
        order_id: str,
        to_status: str,
        actor: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        """Log a status change refused before reaching the store."""
        self.logger.warning(
            "status_update_rejected",
            component=self.component,
            order_id=order_id,
            to_status=to_status,
            actor=actor,
            reason=reason,
            **kwargs,
        )

    def log_store_call(
        self,
        operation: str,
        duration_ms: float,
        success: bool,
        **kwargs: Any,
    ) -> None:
        """Log an Order Store request."""
        self.logger.info(
            "store_call",
            component=self.component,
            operation=operation,
            duration_ms=duration_ms,
            success=success,
            **kwargs,
        )

    def log_error(
        self,
        error: str,
        operation: str,
        **kwargs: Any,
    ) -> None:
        """Log an error."""
        self.logger.error(
            "store_request_failed",
            component=self.component,
            operation=operation,
            error=error,
            **kwargs,
        )
