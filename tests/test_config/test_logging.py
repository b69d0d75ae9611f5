"""Testes de config.logging.

Cobre: configure_logging, get_logger, mask_address,
CorrelationIdFilter, create_json_formatter.
"""

from __future__ import annotations

import json
import logging

import pytest

from config.logging import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    CorrelationIdFilter,
    configure_logging,
    create_json_formatter,
    get_logger,
    mask_address,
)
from config.logging.config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS


def _record(msg: str = "message", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestConfigureLogging:
    """Testes para configure_logging."""

    @pytest.mark.parametrize("level", ["DEBUG", "info", "Warning", "ERROR", "CRITICAL"])
    def test_configure_logging_sets_root_level(self, level: str) -> None:
        configure_logging(level=level)
        assert logging.getLogger().level == getattr(logging, level.upper())

    def test_configure_logging_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="INVALID")

    def test_configure_logging_replaces_handlers(self) -> None:
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging()
        assert len(root.handlers) == 1
        assert any(isinstance(f, CorrelationIdFilter) for f in root.handlers[0].filters)

    def test_httpx_request_logs_are_silenced(self) -> None:
        """httpx loga cada POST de webhook em INFO; fica em WARNING."""
        configure_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_constants(self) -> None:
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS
        assert DEFAULT_SERVICE_NAME == "whatsapp_sender"

    def test_get_logger_same_name_returns_same_instance(self) -> None:
        assert get_logger("same.module") is get_logger("same.module")
        assert get_logger("same.module").name == "same.module"


class TestCorrelationIdFilter:
    """Testes para CorrelationIdFilter."""

    def test_filter_adds_correlation_id_and_service(self) -> None:
        filter_ = CorrelationIdFilter("my_service", lambda: "corr-123")
        record = _record()

        assert filter_.filter(record) is True
        assert record.correlation_id == "corr-123"
        assert record.service == "my_service"

    def test_filter_preserves_explicit_correlation_id(self) -> None:
        filter_ = CorrelationIdFilter("svc", lambda: "from-getter")
        record = _record()
        record.correlation_id = "explicit-id"

        filter_.filter(record)

        assert record.correlation_id == "explicit-id"

    def test_filter_uses_empty_string_without_getter(self) -> None:
        filter_ = CorrelationIdFilter("service_name")
        record = _record(level=logging.ERROR)

        assert filter_.filter(record) is True
        assert record.correlation_id == ""


class TestCreateJsonFormatter:
    """Testes para create_json_formatter e constantes."""

    def test_required_fields_and_rename_map(self) -> None:
        assert set(REQUIRED_LOG_FIELDS) == {
            "asctime",
            "levelname",
            "name",
            "message",
            "correlation_id",
            "service",
        }
        assert FIELD_RENAME_MAP == {
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        }

    def test_json_formatter_outputs_renamed_fields_and_extras(self) -> None:
        from pythonjsonlogger.json import JsonFormatter

        formatter = create_json_formatter()
        assert isinstance(formatter, JsonFormatter)

        record = _record("connection_state_changed")
        record.correlation_id = "abc-123"
        record.service = "test_service"
        record.to_state = "CONNECTED"

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "connection_state_changed"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "test.logger"
        assert payload["correlation_id"] == "abc-123"
        assert payload["service"] == "test_service"
        assert payload["to_state"] == "CONNECTED"
        assert "timestamp" in payload


class TestMaskAddress:
    """Números nunca aparecem completos nos logs."""

    def test_masks_user_address_keeping_last_digits(self) -> None:
        assert mask_address("15551234567@s.whatsapp.net") == "***4567"

    def test_masks_raw_number(self) -> None:
        assert mask_address("+1 (555) 123-4567") == "***4567"

    def test_short_values_are_fully_masked(self) -> None:
        assert mask_address("123") == "***"

    def test_group_address_is_kept(self) -> None:
        assert mask_address("120363025@g.us") == "120363025@g.us"
