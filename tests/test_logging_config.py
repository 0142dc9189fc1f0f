"""Tests for logging setup and the JSON formatter."""
import json
import logging
import logging.handlers
import sys
from decimal import Decimal

from backoffice.logging_config import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.use_cases.expenses",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Expense %s created",
        args=("e-1",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    payload = json.loads(
        JSONFormatter().format(_record(organization_id="org-1", expense_id="e-1", duration=Decimal("0.25")))
    )

    assert payload["message"] == "Expense e-1 created"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "services.use_cases.expenses"
    assert payload["organization_id"] == "org-1"
    assert payload["expense_id"] == "e-1"
    assert payload["duration"] == "0.25"
    assert "supplier_id" not in payload


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(JSONFormatter().format(record))
    assert "RuntimeError: boom" in payload["exception"]


def test_setup_logging_installs_handlers(tmp_path, monkeypatch):
    root = logging.getLogger()
    saved_level = root.level
    monkeypatch.setattr(root, "handlers", [])

    try:
        setup_logging(tmp_path)

        assert [type(h) for h in root.handlers] == [
            logging.StreamHandler,
            logging.handlers.RotatingFileHandler,
            logging.handlers.RotatingFileHandler,
        ]
        assert root.handlers[2].level == logging.ERROR
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

        logging.getLogger("services.notifications").error(
            "delivery failed", extra={"organization_id": "org-1", "event_type": "created"}
        )
        for handler in root.handlers:
            handler.flush()

        errors = (tmp_path / "errors.log").read_text(encoding="utf-8").strip().splitlines()
        payload = json.loads(errors[-1])
        assert payload["message"] == "delivery failed"
        assert payload["organization_id"] == "org-1"
        assert payload["event_type"] == "created"
        assert (tmp_path / "backoffice.log").exists()
    finally:
        for handler in root.handlers:
            handler.close()
        root.setLevel(saved_level)


def test_setup_logging_replaces_only_its_own_handlers(tmp_path, monkeypatch):
    root = logging.getLogger()
    saved_level = root.level
    foreign = logging.NullHandler()
    monkeypatch.setattr(root, "handlers", [foreign])

    try:
        setup_logging(tmp_path)
        first = list(root.handlers)
        setup_logging(tmp_path)

        assert root.handlers[0] is foreign
        assert len(root.handlers) == 4
        assert not set(first[1:]) & set(root.handlers)
    finally:
        for handler in root.handlers:
            handler.close()
        root.setLevel(saved_level)
