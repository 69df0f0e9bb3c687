"""Tests for the structured logging system (rent_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from rent_kernel.exceptions import PaymentNotFoundError
from rent_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    """Parse all JSON log lines from a stream."""
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("hello")

        record = _parse_log(stream)
        assert record["message"] == "hello"
        assert record["level"] == "INFO"
        assert record["logger"] == "rent_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info(
            "rent_payment_recorded",
            extra={"payment_id": "p-1", "amount": "15000"},
        )

        record = _parse_log(stream)
        assert record["payment_id"] == "p-1"
        assert record["amount"] == "15000"

    def test_decimal_and_uuid_serialized_as_strings(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        tenant_id = uuid4()
        get_logger("test").info(
            "values",
            extra={"tenant_ref": tenant_id, "total": Decimal("12000.50")},
        )

        record = _parse_log(stream)
        assert record["tenant_ref"] == str(tenant_id)
        assert record["total"] == "12000.50"

    def test_exception_fields_flattened(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        payment_id = str(uuid4())
        try:
            raise PaymentNotFoundError(payment_id)
        except PaymentNotFoundError:
            get_logger("test").error("lookup_failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "PaymentNotFoundError"
        assert record["exc_code"] == "PAYMENT_NOT_FOUND"
        assert record["exc_collection"] == "rent_payments"
        assert record["exc_record_id"] == payment_id
        assert record["exc_payment_id"] == payment_id
        assert "traceback" in record


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation into log records."""

    def test_set_fields_appear_in_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="corr-1", actor_id="clerk")
        get_logger("test").info("with_context")

        record = _parse_log(stream)
        assert record["correlation_id"] == "corr-1"
        assert record["actor_id"] == "clerk"

    def test_bind_restores_previous_values(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        tenant_id = uuid4()

        with LogContext.bind(tenant_id=tenant_id, payment_id="pay-1"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = _parse_all_logs(stream)
        assert inside["tenant_id"] == str(tenant_id)
        assert inside["payment_id"] == "pay-1"
        assert "tenant_id" not in outside
        assert "payment_id" not in outside

    def test_bind_ignores_none(self):
        with LogContext.bind(tenant_id=None, payment_id="pay-2"):
            assert LogContext.get_all() == {"payment_id": "pay-2"}

    def test_clear(self):
        LogContext.set(tenant_id="t-1")
        LogContext.clear()
        assert LogContext.get_all() == {}


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for logger configuration."""

    def test_idempotent(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        configure_logging(handler=handler)
        assert len(logging.getLogger("rent_kernel").handlers) == 1

    def test_level_respected(self):
        handler, stream = _make_handler()
        configure_logging(level=logging.WARNING, handler=handler)
        logger = get_logger("test")
        logger.info("dropped")
        logger.warning("kept")

        records = _parse_all_logs(stream)
        assert [r["message"] for r in records] == ["kept"]

    def test_does_not_propagate_to_root(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        assert logging.getLogger("rent_kernel").propagate is False

    def test_reset_clears_handlers(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        reset_logging()
        assert logging.getLogger("rent_kernel").handlers == []
