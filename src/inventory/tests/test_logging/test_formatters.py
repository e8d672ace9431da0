import json
import logging
import sys

from inventory.core.logging.formatters import ColorFormatter, JsonFormatter


def make_record(level=logging.INFO):
    return logging.LogRecord("inventory", level, __file__, 10, "hello %s", ("tester",), None)


def test_json_formatter_basic_fields():
    rec = make_record()
    rec.context = "ProductService.create_product"
    rec.status_code = 409
    rec.request_id = "req-1"

    data = json.loads(JsonFormatter(env="testing", service="svc").format(rec))

    assert data["message"] == "hello tester"
    assert data["level"] == "INFO"
    assert data["service"] == "svc"
    assert data["env"] == "testing"
    assert data["request_id"] == "req-1"
    assert data["context"] == "ProductService.create_product"
    assert data["status_code"] == 409
    assert "timestamp" in data
    assert "version" in data


def test_json_formatter_non_serializable_extra():
    rec = make_record()

    class Opaque:
        def __repr__(self):
            return "<Opaque>"

    rec.obj = Opaque()

    data = json.loads(JsonFormatter(env="dev").format(rec))

    assert data["obj"] == "<Opaque>"
    assert data["service"] == "inventory-api"


def test_json_formatter_includes_traceback():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        rec = logging.LogRecord("inventory", logging.ERROR, __file__, 10, "failed", (), sys.exc_info())

    data = json.loads(JsonFormatter().format(rec))

    assert "RuntimeError: boom" in data["exc_info"]


def test_color_formatter_appends_context():
    rec = make_record(logging.WARNING)
    rec.request_id = "rid-9"
    rec.context = "GlobalErrorHandler"

    line = ColorFormatter().format(rec)

    assert "hello tester" in line
    assert "rid-9" in line
    assert line.endswith("[GlobalErrorHandler]")
    assert ColorFormatter.COLOR_CODES["WARNING"] in line
