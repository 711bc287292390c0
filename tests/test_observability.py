import logging

from unitcalc import evaluate
from unitcalc.observability import bind_request_id, current_request_id, log_event, reset_request_id


def test_log_event_attaches_bound_request_id(caplog):
    token = bind_request_id("req-1")
    try:
        with caplog.at_level(logging.INFO, logger="unitcalc.observability"):
            log_event("calc.test", answer=42)
    finally:
        reset_request_id(token)

    record = caplog.records[-1]
    assert record.getMessage() == "calc.test"
    assert record.payload == {"request_id": "req-1", "answer": 42}
    assert current_request_id() is None


def test_evaluation_outcome_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="unitcalc.observability"):
        evaluate("2 + 2")
    payloads = [r.payload for r in caplog.records if r.getMessage() == "calc.evaluated"]
    assert payloads[-1]["result"] == "4"
