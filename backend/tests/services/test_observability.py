"""Structured logging — JSON lines, extras, and the request access log."""

import json
import logging

from smartshooter.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "smartshooter.test", logging.INFO, __file__, 1, "saved %s", ("x",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_known_extras():
    line = JSONFormatter().format(_record(editor_id="e-1", rounds_count=10, ignored="no"))
    entry = json.loads(line)
    assert entry["message"] == "saved x"
    assert entry["level"] == "INFO"
    assert entry["editor_id"] == "e-1"
    assert entry["rounds_count"] == 10
    assert "ignored" not in entry


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        first = setup_logging("DEBUG", "json")
        second = setup_logging("INFO", "text")
        names = [h.get_name() for h in root.handlers]
        assert names.count("smartshooter") == 1
        assert first not in root.handlers
        assert second in root.handlers
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)


async def test_each_request_logs_one_access_line(client, caplog):
    caplog.set_level(logging.INFO, logger="smartshooter.access")
    await client.get("/api/v1/sessions", headers={"X-User-Id": "player-9"})
    access = [r for r in caplog.records if r.name == "smartshooter.access"]
    assert len(access) == 1
    assert access[0].status_code == 200
    assert access[0].user_id == "player-9"
    assert access[0].path == "/api/v1/sessions"
