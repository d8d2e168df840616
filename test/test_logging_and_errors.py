"""Tests for structured logging and the shared error taxonomy."""

import io
import json
import logging

import pytest

from integrations.generation.models import (
    GenerationError,
    GenerationRejection,
    GenerationSoftError,
    GenerationTransportError,
)
from integrations.shared import logging as structured_logging
from integrations.shared.errors import (
    ProviderError,
    ProviderRejection,
    ProviderSoftError,
    TransportError,
)
from integrations.shared.logging import (
    StructuredFormatter,
    correlation_id_var,
    get_logger,
    log_with_context,
    mask_secret,
    setup_logging,
)


class TestStructuredFormatter:
    def _record(self, **extra: object) -> logging.LogRecord:
        logger = logging.getLogger("test.structured")
        return logger.makeRecord(
            logger.name, logging.INFO, __file__, 1, "Configured number webhooks", (), None, extra=extra
        )

    def test_formats_json_with_extra(self) -> None:
        output = StructuredFormatter().format(self._record(sid="PN123", status_code=200))
        data = json.loads(output)

        assert data["message"] == "Configured number webhooks"
        assert data["level"] == "INFO"
        assert data["logger"] == "test.structured"
        assert data["sid"] == "PN123"
        assert data["status_code"] == 200

    def test_includes_correlation_id(self) -> None:
        token = correlation_id_var.set("corr-42")
        try:
            data = json.loads(StructuredFormatter().format(self._record()))
        finally:
            correlation_id_var.reset(token)

        assert data["correlation_id"] == "corr-42"

    def test_get_logger_adds_single_handler(self) -> None:
        logger = get_logger("test.single_handler")
        get_logger("test.single_handler")

        assert len(logger.handlers) == 1

    def test_get_logger_does_not_propagate(self) -> None:
        assert get_logger("test.no_propagate").propagate is False


class TestLogWithContext:
    def _capture(self, name: str) -> tuple[logging.Logger, io.StringIO]:
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(StructuredFormatter())
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.propagate = False
        logger.setLevel(logging.INFO)
        return logger, stream

    def test_merges_context_fields(self) -> None:
        logger, stream = self._capture("test.with_context")

        log_with_context(logger, logging.INFO, "Attached generated media", key="abc.png", byte_size=10)

        data = json.loads(stream.getvalue())
        assert data["message"] == "Attached generated media"
        assert data["key"] == "abc.png"
        assert data["byte_size"] == 10

    def test_respects_level(self) -> None:
        logger, stream = self._capture("test.with_context_level")

        log_with_context(logger, logging.DEBUG, "hidden", key="x")

        assert stream.getvalue() == ""

    def test_setup_logging_reports_app_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls: list[dict[str, object]] = []
        monkeypatch.setattr(
            structured_logging,
            "log_with_context",
            lambda logger, level, message, **extra: calls.append(extra),
        )
        monkeypatch.setenv("APP_NAME", "inbound-router")
        monkeypatch.setenv("APP_ENV", "qa")
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            setup_logging()
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)

        assert calls[0]["app_name"] == "inbound-router"
        assert calls[0]["app_env"] == "qa"


class TestMaskSecret:
    def test_mask(self) -> None:
        assert mask_secret("") == ""
        assert mask_secret("AC1") == "***"
        assert mask_secret("AC1234567890") == "AC1234***"


class TestErrorTaxonomy:
    def test_rejection_carries_status(self) -> None:
        err = ProviderRejection("boom", status_code=502, body="bad gateway")

        assert err.status_code == 502
        assert err.body == "bad gateway"
        assert err.error_code == "502"
        assert err.provider_response == {}

    def test_generation_errors_cover_both_axes(self) -> None:
        assert issubclass(GenerationRejection, GenerationError)
        assert issubclass(GenerationRejection, ProviderRejection)
        assert issubclass(GenerationSoftError, ProviderSoftError)
        assert issubclass(GenerationTransportError, TransportError)
        assert issubclass(GenerationError, ProviderError)

    def test_generation_rejection_init(self) -> None:
        err = GenerationRejection("nope", status_code=500, body="{}")

        assert err.status_code == 500
        assert str(err) == "nope"
