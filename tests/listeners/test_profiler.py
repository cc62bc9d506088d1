import logging

from listenerchain.connection import InstrumentedConnection
from listenerchain.events import Event, Operation
from listenerchain.listeners import QueryProfiler
from listenerchain.utils import get_logger


def test_profiler_records_summary(caplog):
    caplog.set_level(logging.WARNING, logger="listenerchain.tests.profiler")
    profiler = QueryProfiler(get_logger("tests.profiler"), n_plus_one_threshold=3, sample_size=2)
    for i in range(3):
        profiler.record("SELECT * FROM foo WHERE id = ?", [i], 1.5)
    assert any("Potential N+1 detected" in rec.message for rec in caplog.records)

    summary = profiler.summary()
    assert summary[0]["count"] == 3
    assert summary[0]["distinct_params"] >= 2
    assert summary[0]["average_ms"] == 1.5


def test_profiler_reset():
    profiler = QueryProfiler(n_plus_one_threshold=2)
    profiler.record("SELECT 1", [], 0.5)
    profiler.reset()
    assert profiler.summary() == []
    assert profiler.last_event is None


def test_profiler_ignores_pre_hooks_and_non_events():
    profiler = QueryProfiler()
    event = Event(Operation.QUERY, query="SELECT 1")
    profiler.pre_query(event)
    profiler.on_load(object())
    assert profiler.events == []

    profiler.post_query(event)
    assert profiler.last_event is event


def test_profiler_attached_to_connection(caplog):
    caplog.set_level(logging.WARNING, logger="listenerchain.listeners.profiler")
    profiler = QueryProfiler(n_plus_one_threshold=3)
    connection = InstrumentedConnection("sqlite:///:memory:")
    connection.add_listener(profiler, "profiler")

    connection.execute("CREATE TABLE item (id INTEGER PRIMARY KEY, name TEXT)")
    for name in ("a", "b", "c"):
        connection.execute("INSERT INTO item (name) VALUES (?)", (name,))
    connection.close()

    operations = [event.operation for event in profiler.events]
    assert operations[0] is Operation.CONNECT
    assert operations[-1] is Operation.CLOSE
    insert_stats = [s for s in profiler.summary() if s["sql"].startswith("INSERT")]
    assert insert_stats[0]["count"] == 3
    assert any("Potential N+1 detected" in rec.message for rec in caplog.records)
