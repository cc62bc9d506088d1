import io
import logging

from listenerchain.utils.logging import (
    LOG_FORMAT,
    configure_logging,
    correlation_scope,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    time_call,
)


def test_correlation_id_round_trip():
    token = set_correlation_id("test-token")
    assert token == "test-token"
    assert get_correlation_id() == "test-token"


def test_correlation_scope_restores_previous_id():
    set_correlation_id("outer")
    with correlation_scope("inner") as cid:
        assert cid == "inner"
        assert get_correlation_id() == "inner"
    assert get_correlation_id() == "outer"


def test_get_logger_is_namespaced():
    assert get_logger("connection").name == "listenerchain.connection"
    assert get_logger("listenerchain.records").name == "listenerchain.records"
    assert logging.getLogger("listenerchain").handlers


def test_configure_logging_keeps_existing_handler():
    logger = configure_logging()
    handlers = list(logger.handlers)
    assert configure_logging(stream=io.StringIO()) is logger
    assert logger.handlers == handlers
    assert logger.handlers[0].formatter._fmt == LOG_FORMAT


def test_time_call_logs_duration(caplog):
    logger = get_logger("tests.logging")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    with time_call("unit-test", logger, threshold_ms=0) as timer:
        pass
    assert timer.elapsed_ms is not None
    records = [record for record in caplog.records if record.name == logger.name]
    assert any("unit-test took" in record.message for record in records)
    assert records[-1].levelno == logging.WARNING


def test_time_call_redacts_params_and_marks_failures(caplog):
    logger = get_logger("tests.logging")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    try:
        with time_call("failing", logger, sql="SELECT ?", params=("token=abc",), threshold_ms=10_000):
            raise ValueError("boom")
    except ValueError:
        pass
    record = [r for r in caplog.records if r.name == logger.name][-1]
    assert record.levelno == logging.DEBUG
    assert record.message.endswith("(failed)")
    assert record.failed is True
    assert record.params == ["***"]
