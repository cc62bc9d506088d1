"""
Audit example: several listeners observing one connection and its records.
"""

from __future__ import annotations

from typing import Any, Dict, List

from listenerchain import (
    DynamicListener,
    InstrumentedConnection,
    ListenerChain,
    LoggingListener,
    QueryProfiler,
)

from .models import SCHEMA, Task


class AuditTrail(DynamicListener):
    """
    Keeps a plain-text line per write, commit and record deletion.
    """

    def __init__(self) -> None:
        super().__init__()
        self.entries: List[str] = []

    def handle(self, hook: str, payload: Any) -> None:
        if hook in ("post_exec", "post_stmt_execute") and payload.query.lstrip().upper().startswith(
            ("INSERT", "UPDATE", "DELETE")
        ):
            self.entries.append(f"write: {payload.query}")
        elif hook == "post_transaction_commit":
            self.entries.append("commit")
        elif hook == "on_collection_delete":
            self.entries.append(f"deleted {payload.record_cls.__name__} collection")


def bootstrap_connection(dsn: str = "sqlite:///:memory:") -> InstrumentedConnection:
    chain = ListenerChain()
    chain.add(LoggingListener(), "log")
    chain.add(AuditTrail(), "audit")
    chain.add(QueryProfiler(), "profiler")
    connection = InstrumentedConnection(dsn, listener=chain)
    connection.execute(SCHEMA)
    Task.__listener__ = chain
    return connection


def seed_sample_data(connection: InstrumentedConnection) -> List[Dict[str, Any]]:
    tasks = [("Write docs", 1), ("Ship release", 0), ("Review PR", 1)]
    with connection.transaction():
        for title, done in tasks:
            connection.execute('INSERT INTO "task" (title, done) VALUES (?, ?)', (title, done))
    return [task.to_dict() for task in connection.fetch_records(Task, 'SELECT * FROM "task" ORDER BY id')]


def archive_finished_tasks(connection: InstrumentedConnection) -> int:
    finished = connection.fetch_records(Task, 'SELECT * FROM "task" WHERE done = ?', (1,))
    return finished.delete(connection)


def run_demo() -> Dict[str, Any]:
    connection = bootstrap_connection()
    try:
        seeded = seed_sample_data(connection)
        archived = archive_finished_tasks(connection)
        remaining = [
            row["title"] for row in connection.query('SELECT title FROM "task"').fetch_all()
        ]
        chain = connection.listener
        return {
            "seeded": len(seeded),
            "archived": archived,
            "remaining": remaining,
            "audit": list(chain.get("audit").entries),
            "statements": chain.get("profiler").summary(),
        }
    finally:
        connection.close()
        Task.__listener__ = None


if __name__ == "__main__":
    from pprint import pprint

    pprint(run_demo())
