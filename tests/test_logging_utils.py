import json
import logging

from ambulatorio.logging_utils import (
    JSONLogFormatter,
    RequestContextFilter,
    get_request_id,
    reset_request_id,
    set_request_id,
)


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("ambulatorio.services", logging.INFO, __file__, 1, msg, (), None)
    record.__dict__.update(extra)
    return record


def test_request_id_nel_contesto():
    assert get_request_id() == "unknown"
    token = set_request_id("req-1")
    try:
        record = _record("Inizio processo delete medico")
        RequestContextFilter().filter(record)
        assert record.request_id == "req-1"
    finally:
        reset_request_id(token)
    assert get_request_id() == "unknown"


def test_formatter_json():
    record = _record("Creato medico id=%s", entita="medico")
    record.args = (3,)
    RequestContextFilter().filter(record)

    out = json.loads(JSONLogFormatter().format(record))

    assert out["message"] == "Creato medico id=3"
    assert out["level"] == "INFO"
    assert out["logger"] == "ambulatorio.services"
    assert out["request_id"] == "-"
    assert out["entita"] == "medico"
