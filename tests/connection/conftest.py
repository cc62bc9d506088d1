import pytest

from listenerchain.connection import InstrumentedConnection
from listenerchain.listeners import DynamicListener


class HookRecorder(DynamicListener):
    def __init__(self):
        super().__init__()
        self.calls = []

    def handle(self, hook, payload):
        self.calls.append((hook, payload))

    @property
    def hooks(self):
        return [hook for hook, _ in self.calls]

    def clear(self):
        self.calls.clear()


@pytest.fixture
def recorder():
    return HookRecorder()


@pytest.fixture
def connection(tmp_path, recorder):
    connection = InstrumentedConnection(f"sqlite:///{tmp_path / 'hooks.db'}")
    connection.add_listener(recorder, "recorder")
    connection.execute("CREATE TABLE item (id INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    recorder.clear()
    yield connection
    connection.close()
