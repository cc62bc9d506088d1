"""
Records used by the audit example.
"""

from listenerchain import Record


class Task(Record):
    __tablename__ = "task"


SCHEMA = (
    'CREATE TABLE IF NOT EXISTS "task" ('
    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "title TEXT NOT NULL, "
    "done INTEGER NOT NULL DEFAULT 0)"
)
