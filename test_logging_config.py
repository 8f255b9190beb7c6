"""Tests for the JSON and console log formatters."""

import json
import logging

import pytest

from api.logging_config import (
    SERVICE_NAME,
    ConsoleFormatter,
    JSONFormatter,
    estimate_context,
    setup_logging,
    setup_logging_from_env,
)
from calculator import DEFAULT_WORK_CATEGORIES, CostEstimator, QualityLevel
from calculator.project import ProjectModel


def make_record(**extra):
    record = logging.LogRecord("ingestion.adapter", logging.INFO, __file__, 10, "Ingested %s", ("plan.pdf",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context():
    entry = json.loads(JSONFormatter().format(make_record(document="plan.pdf", room_count=3)))

    assert entry["service"] == SERVICE_NAME
    assert entry["message"] == "Ingested plan.pdf"
    assert entry["document"] == "plan.pdf"
    assert entry["room_count"] == 3
    assert "grand_total" not in entry


def test_console_formatter_appends_context():
    line = ConsoleFormatter().format(make_record(room_count=2, quality_level="premium"))
    assert line.endswith("Ingested plan.pdf room_count=2 quality_level=premium")


def test_console_formatter_without_context():
    assert ConsoleFormatter().format(make_record()).endswith("INFO: Ingested plan.pdf")


def test_estimate_context(sample_rooms):
    project = ProjectModel(rooms=tuple(sample_rooms), quality_level=QualityLevel.PREMIUM)
    result = CostEstimator().calculate(sample_rooms, DEFAULT_WORK_CATEGORIES, QualityLevel.PREMIUM)

    assert estimate_context(project, result) == {
        "room_count": 3,
        "quality_level": "premium",
        "grand_total": round(result.grand_total, 2),
    }


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


@pytest.mark.parametrize("flag, formatter", [("true", JSONFormatter), ("false", ConsoleFormatter), ("1", JSONFormatter)])
def test_setup_logging_from_env(monkeypatch, restore_root_logger, flag, formatter):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_JSON", flag)

    setup_logging_from_env()

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1
    assert isinstance(restore_root_logger.handlers[0].formatter, formatter)


def test_setup_logging_quiets_http_clients(restore_root_logger):
    setup_logging("INFO", json_output=False)
    assert logging.getLogger("httpx").level == logging.WARNING
