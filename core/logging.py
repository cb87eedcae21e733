"""
Logging setup for the registration service.

JSON records in staging/production, plain text in development.
Applicant phone numbers are masked before they reach a log line.
"""
import logging
import sys
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from core.config import settings


# Record attributes passed through ``extra=`` that become top-level JSON keys
BOOKING_CONTEXT_FIELDS = ("booking_id", "operation", "status_code")

PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
JSON_FORMAT = '%(timestamp)s %(level)s %(name)s %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def mask_phone(phone: Optional[str], visible: int = 4) -> str:
    """Keep only the last digits of a phone number, e.g. ``********7890``."""
    text = str(phone or '')
    if len(text) <= visible:
        return '*' * len(text)
    return '*' * (len(text) - visible) + text[-visible:]


class RegistrationJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding service and booking context."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any]
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = self.formatTime(record, self.datefmt)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['service'] = settings.app_name
        log_record['environment'] = settings.app_env

        for name in BOOKING_CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_record[name] = getattr(value, 'value', value)

        if record.exc_info:
            log_record['exc_info'] = self.formatException(record.exc_info)


def build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return RegistrationJsonFormatter(fmt=JSON_FORMAT, datefmt=DATE_FORMAT)
    return logging.Formatter(fmt=PLAIN_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(level: Optional[str] = None, json_format: Optional[bool] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name, defaults to ``settings.log_level``
        json_format: Force JSON output on or off; by default JSON is used
            outside development
    """
    level = (level or settings.log_level).upper()
    if json_format is None:
        json_format = settings.app_env in ("production", "staging")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(build_formatter(json_format))
    root_logger.addHandler(console_handler)

    for name, logger_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(logger_level)

    # SQL echo only when explicitly debugging locally
    if settings.is_development and settings.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    logging.info(
        "Logging configured",
        extra={"log_level": level, "environment": settings.app_env, "json_logging": json_format},
    )
