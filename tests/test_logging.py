"""Tests for logging setup."""
import json
import logging

import pytest

from core.logging import RegistrationJsonFormatter, mask_phone, setup_logging
from domain.enums import BookingOperation


pytestmark = pytest.mark.unit


@pytest.fixture(scope="function")
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


class TestMaskPhone:
    """Tests for phone masking in log lines."""

    def test_keeps_last_four_digits(self):
        assert mask_phone("6281234567890") == "*********7890"

    def test_short_and_empty(self):
        assert mask_phone("123") == "***"
        assert mask_phone(None) == ""


class TestRegistrationJsonFormatter:
    """Tests for structured log records."""

    def test_booking_context_fields(self):
        formatter = RegistrationJsonFormatter(fmt="%(timestamp)s %(level)s %(name)s %(message)s")
        record = logging.makeLogRecord({
            "name": "services.booking_service",
            "levelname": "INFO",
            "levelno": logging.INFO,
            "msg": "Created booking RT-AB12",
            "booking_id": "RT-AB12",
            "operation": BookingOperation.CREATE,
        })

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "Created booking RT-AB12"
        assert payload["level"] == "INFO"
        assert payload["booking_id"] == "RT-AB12"
        assert payload["operation"] == "create"
        assert "status_code" not in payload


class TestSetupLogging:
    """Tests for root logger configuration."""

    def test_json_output(self, restore_root_logger):
        setup_logging(level="warning", json_format=True)

        assert restore_root_logger.level == logging.WARNING
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, RegistrationJsonFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_plain_output(self, restore_root_logger):
        setup_logging(level="DEBUG", json_format=False)

        formatter = restore_root_logger.handlers[0].formatter
        assert not isinstance(formatter, RegistrationJsonFormatter)
        assert restore_root_logger.level == logging.DEBUG
