import json
import logging

from gateway.observability import JSONFormatter, setup_logging


def test_json_formatter_includes_command_extras():
    record = logging.LogRecord("gateway", logging.INFO, __file__, 1, "find d.c", None, None)
    record.operation = "find"
    record.db_ms = 1.5
    out = json.loads(JSONFormatter().format(record))
    assert out["message"] == "find d.c"
    assert out["operation"] == "find"
    assert out["db_ms"] == 1.5
    assert "database" not in out


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = len(root.handlers)
    setup_logging("DEBUG", "json")
    setup_logging("INFO", "text")
    ours = [h for h in root.handlers if getattr(h, "_gateway", False)]
    assert len(ours) == 1
    assert len(root.handlers) <= before + 1
    assert root.level == logging.INFO
    root.removeHandler(ours[0])
