"""
Logging Configuration and Utilities

Structured logging built on structlog, rendered through the standard
library so that application, uvicorn and SQLAlchemy records share the
same handlers. ``LOG_FORMAT=json`` switches the console/file output to
JSON lines via python-json-logger.
"""

import logging
import logging.handlers
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from student_records.config.settings import Settings, settings as default_settings

# Context variable for request tracking
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)

_configured = False


class RequestContextProcessor:
    """Add request context to log records"""

    def __init__(self, environment: str = "development"):
        self.environment = environment

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict['request_id'] = req_id

        event_dict['service'] = 'student-records'
        event_dict['environment'] = self.environment
        return event_dict


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


class LoggingConfig:
    """Centralized logging configuration"""

    @staticmethod
    def configure_structured_logging(config: Settings):
        """Configure structlog to hand events over to the stdlib handlers"""

        processors = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            RequestContextProcessor(config.ENVIRONMENT),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if config.LOG_FORMAT == "json":
            # Event fields travel as ``extra`` and are emitted by CustomJsonFormatter
            processors.append(structlog.stdlib.render_to_log_kwargs)
        else:
            processors.append(structlog.processors.KeyValueRenderer(key_order=['event']))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def configure_standard_logging(config: Settings):
        """Configure standard Python logging"""

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

        root_logger.handlers.clear()

        if config.LOG_FORMAT == "json":
            formatter = CustomJsonFormatter(
                '%(asctime)s %(name)s %(levelname)s %(message)s'
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if config.LOG_FILE:
            log_path = Path(config.LOG_FILE)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        LoggingConfig._configure_library_loggers(config)

    @staticmethod
    def _configure_library_loggers(config: Settings):
        """Configure logging for external libraries"""

        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.error").setLevel(logging.INFO)

        if config.DB_ECHO:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
        else:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

        logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get configured logger instance.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        structlog logger bound to the stdlib logger of that name
    """
    return structlog.stdlib.get_logger(name)


def setup_logging(config: Optional[Settings] = None, force: bool = False) -> None:
    """Initialize logging configuration once per process"""
    global _configured
    if _configured and not force:
        return

    config = config or default_settings
    LoggingConfig.configure_structured_logging(config)
    LoggingConfig.configure_standard_logging(config)
    _configured = True

    get_logger(__name__).info(
        "Logging system initialized",
        log_level=config.LOG_LEVEL,
        log_format=config.LOG_FORMAT,
    )


__all__ = [
    'get_logger',
    'setup_logging',
    'LoggingConfig',
    'RequestContextProcessor',
    'CustomJsonFormatter',
    'request_id',
]
