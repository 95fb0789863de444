import json
import logging

from app.logging import JsonFormatter


def test_json_formatter_includes_extra_fields_only() -> None:
    record = logging.LogRecord(
        "app.test", logging.INFO, __file__, 10, "Received %s", ("image",), None
    )
    record.size = 123

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Received image"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "app.test"
    assert payload["size"] == 123
    assert "pathname" not in payload
    assert "lineno" not in payload
