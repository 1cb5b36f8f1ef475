"""
Logging configuration for the pricing engine

Console output for development, rotating JSON files for the main log, errors
and timed operations, and structlog wired onto the standard library.
"""

import logging
import logging.handlers
import os
import sys
import threading
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from src.infrastructure.configuration.config import get_config
from src.infrastructure.utilities.constants import FileSettings, LoggingSettings


class ProductionLogger:
    """Production logging configuration"""

    @staticmethod
    def setup_logging(config=None) -> None:
        """
        Setup logging for the whole process

        Features:
        - Console output outside production
        - Structured JSON main and error logs
        - Separate log for timed operations
        - structlog routed through the standard handlers
        """
        config = config or get_config()

        logs_dir = Path(config.log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, config.log_level.upper()))
        root_logger.handlers.clear()

        if config.environment != "production":
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            root_logger.addHandler(console_handler)

        app_handler = logging.handlers.RotatingFileHandler(
            logs_dir / FileSettings.MAIN_LOG_FILE,
            maxBytes=LoggingSettings.MAX_LOG_FILE_SIZE,
            backupCount=LoggingSettings.MAIN_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        app_handler.setFormatter(PricingJsonFormatter())
        app_handler.setLevel(logging.INFO)
        root_logger.addHandler(app_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            logs_dir / FileSettings.ERROR_LOG_FILE,
            maxBytes=LoggingSettings.MAX_LOG_FILE_SIZE,
            backupCount=LoggingSettings.ERROR_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        error_handler.setFormatter(PricingJsonFormatter())
        error_handler.setLevel(logging.ERROR)
        root_logger.addHandler(error_handler)

        performance_handler = logging.handlers.RotatingFileHandler(
            logs_dir / FileSettings.PERFORMANCE_LOG_FILE,
            maxBytes=LoggingSettings.PERFORMANCE_LOG_FILE_SIZE,
            backupCount=LoggingSettings.PERFORMANCE_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        performance_handler.setFormatter(PricingJsonFormatter())
        performance_handler.setLevel(logging.INFO)
        performance_handler.addFilter(PerformanceFilter())
        root_logger.addHandler(performance_handler)

        ProductionLogger._configure_specific_loggers()
        configure_structlog()

        logging.getLogger(__name__).info(
            "Logging configured",
            extra={"environment": config.environment, "log_level": config.log_level},
        )

    @staticmethod
    def _configure_specific_loggers():
        """Quiet noisy third-party loggers"""
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        logging.getLogger("asyncio").setLevel(logging.WARNING)


class PerformanceFilter(logging.Filter):
    """Passes records emitted by timed operations"""

    def filter(self, record):
        return hasattr(record, "operation_time")

    def __repr__(self):
        return "PerformanceFilter()"


class PricingJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with process context and pricing fields"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(UTC).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["thread_name"] = threading.current_thread().name
        log_record["process_id"] = os.getpid()

        if hasattr(record, "customer_id"):
            log_record["customer_id"] = record.customer_id

        if hasattr(record, "operation_time"):
            log_record["operation_time_ms"] = record.operation_time


def configure_structlog() -> None:
    """Configure structlog to render JSON through the standard library loggers"""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_structured_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


class PerformanceLogger:
    """Context manager that logs how long an operation took"""

    def __init__(
        self,
        operation_name: str,
        logger: Optional[logging.Logger] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.operation_name = operation_name
        self.logger = logger or logging.getLogger(__name__)
        self.details = details or {}
        self.start_time = 0.0
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(
            "Starting operation: %s",
            self.operation_name,
            extra={"operation": self.operation_name, **self.details},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is None:
            self.logger.info(
                "Completed operation: %s",
                self.operation_name,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    "success": True,
                    **self.details,
                },
            )
        else:
            self.logger.error(
                "Failed operation: %s",
                self.operation_name,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    "success": False,
                    "error_type": exc_type.__name__,
                    "error_message": str(exc_val) if exc_val else None,
                    **self.details,
                },
            )
        return False
