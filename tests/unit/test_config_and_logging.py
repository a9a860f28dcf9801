"""Unit tests for settings validation and log formatting."""

import json
import logging

import pytest
from pydantic import ValidationError

from playgate.config import Settings
from playgate.logging_config import (
    DevFormatter,
    JsonFormatter,
    RequestIdFilter,
    get_request_id,
    request_id_var,
)


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.question_cache_ttl_seconds == 300
        assert settings.api_v1_prefix == "/api/v1"

    def test_rejects_unknown_timezone(self):
        with pytest.raises(ValidationError):
            Settings(timezone="Mars/Olympus_Mons")

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValidationError):
            Settings(question_cache_ttl_seconds=0)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("playgate.test", logging.INFO, __file__, 1, "Play blocked", (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogFormatting:
    def test_json_formatter_includes_request_id_and_extra(self):
        token = request_id_var.set("req-1")
        try:
            record = _record(policy="Quiet Hours", user_id=42, payload=object())
            RequestIdFilter().filter(record)
        finally:
            request_id_var.reset(token)

        entry = json.loads(JsonFormatter().format(record))

        assert entry["message"] == "Play blocked"
        assert entry["request_id"] == "req-1"
        assert entry["policy"] == "Quiet Hours"
        assert entry["user_id"] == 42
        assert isinstance(entry["payload"], str)

    def test_json_formatter_outside_request(self):
        record = _record()
        RequestIdFilter().filter(record)
        assert "request_id" not in json.loads(JsonFormatter().format(record))

    def test_dev_formatter_appends_extra(self):
        line = DevFormatter().format(_record(policy_id=3))
        assert "req=-" in line
        assert line.endswith("policy_id=3")

    def test_get_request_id_reads_current_request(self):
        assert get_request_id() is None
        token = request_id_var.set("req-2")
        try:
            assert get_request_id() == "req-2"
        finally:
            request_id_var.reset(token)
        assert get_request_id() is None
