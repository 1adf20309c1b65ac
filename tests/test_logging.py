"""Tests for rolegraph.logging module."""

from __future__ import annotations

import json
import logging
from typing import Iterator

import pytest

from rolegraph import (
    LogLevel,
    RoleGraphConfig,
    RoleGraphFormatter,
    get_subject_logger,
    safe_preview,
    setup_logging,
)


def _record(msg: str = "checked", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("rolegraph.test", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSafePreview:
    def test_none_value(self) -> None:
        assert safe_preview(None) == ""

    def test_whitespace_normalized(self) -> None:
        assert safe_preview("a\n\tb  c") == "a b c"

    def test_truncation(self) -> None:
        result = safe_preview("x" * 300, limit=100)
        assert len(result) == 100
        assert result.endswith("…")

    def test_dict_as_json(self) -> None:
        assert safe_preview({"editor": True}) == '{"editor": true}'


class TestRoleGraphFormatter:
    def test_json_includes_subject_id_and_extra(self) -> None:
        formatter = RoleGraphFormatter(json_format=True)
        data = json.loads(formatter.format(_record(subject_id=42, role_id=7)))
        assert data["message"] == "checked"
        assert data["subject_id"] == "42"
        assert data["role_id"] == "7"
        assert data["level"] == "INFO"

    def test_plain_text(self) -> None:
        formatter = RoleGraphFormatter(json_format=False)
        line = formatter.format(_record(subject_id="u-1"))
        assert "subject_id=u-1" in line
        assert line.endswith(": checked")

    def test_plain_text_includes_extra(self) -> None:
        formatter = RoleGraphFormatter(json_format=False)
        line = formatter.format(_record(subject_id=3, role_id=7))
        assert "subject_id=3 role_id=7: checked" in line

    def test_extra_cannot_replace_fixed_fields(self) -> None:
        formatter = RoleGraphFormatter(json_format=True)
        data = json.loads(formatter.format(_record(level="spoofed")))
        assert data["level"] == "INFO"

    def test_subject_id_omitted(self) -> None:
        formatter = RoleGraphFormatter(include_subject_id=False)
        assert "subject_id" not in json.loads(formatter.format(_record(subject_id=1)))


class TestSubjectLogger:
    def test_adapter_stamps_subject_id(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_subject_logger("rolegraph.test", subject_id=9)
        with caplog.at_level(logging.INFO, logger="rolegraph.test"):
            logger.info("attached")
            logger.info("override", subject_id=10)
        assert [r.subject_id for r in caplog.records] == [9, 10]


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_root(self) -> Iterator[None]:
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_configures_root(self) -> None:
        setup_logging(RoleGraphConfig(log_level=LogLevel.DEBUG, log_json=True))
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        formatter = root.handlers[0].formatter
        assert isinstance(formatter, RoleGraphFormatter)
        assert formatter.json_format is True

    def test_json_override(self) -> None:
        setup_logging(RoleGraphConfig(log_json=True), json_format=False)
        assert logging.getLogger().handlers[0].formatter.json_format is False
