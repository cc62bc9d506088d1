import pytest

from listenerchain.connection import TransactionError
from listenerchain.events import Operation
from listenerchain.listeners import DynamicListener


def count_items(connection):
    return connection.query("SELECT COUNT(*) FROM item").fetch()[0]


def test_commit_fires_transaction_hooks(connection, recorder):
    connection.begin()
    connection.execute("INSERT INTO item (name) VALUES (?)", ("a",))
    connection.commit()

    transaction_hooks = [hook for hook in recorder.hooks if "transaction" in hook]
    assert transaction_hooks == [
        "pre_transaction_begin",
        "post_transaction_begin",
        "pre_transaction_commit",
        "post_transaction_commit",
    ]
    assert count_items(connection) == 1
    assert connection.transaction_depth == 0


def test_rollback_discards_changes(connection, recorder):
    connection.begin()
    connection.execute("INSERT INTO item (name) VALUES (?)", ("a",))
    connection.rollback()

    assert recorder.hooks[-2:] == ["pre_transaction_rollback", "post_transaction_rollback"]
    assert recorder.calls[-1][1].operation is Operation.TX_ROLLBACK
    assert count_items(connection) == 0


def test_nested_levels_use_savepoints(connection, recorder):
    connection.begin()
    connection.execute("INSERT INTO item (name) VALUES (?)", ("outer",))
    connection.begin()
    connection.execute("INSERT INTO item (name) VALUES (?)", ("inner",))
    connection.rollback()
    connection.begin("keep")
    connection.execute("INSERT INTO item (name) VALUES (?)", ("kept",))
    connection.commit()
    connection.commit()

    savepoint_events = [
        (hook, payload.savepoint) for hook, payload in recorder.calls if "savepoint" in hook
    ]
    assert savepoint_events == [
        ("pre_savepoint_create", "sp_1"),
        ("post_savepoint_create", "sp_1"),
        ("pre_savepoint_rollback", "sp_1"),
        ("post_savepoint_rollback", "sp_1"),
        ("pre_savepoint_create", "keep"),
        ("post_savepoint_create", "keep"),
        ("pre_savepoint_commit", "keep"),
        ("post_savepoint_commit", "keep"),
    ]
    names = [row["name"] for row in connection.query("SELECT name FROM item ORDER BY id").fetch_all()]
    assert names == ["outer", "kept"]


def test_transaction_context_manager_rolls_back_on_error(connection):
    with pytest.raises(ValueError):
        with connection.transaction():
            connection.execute("INSERT INTO item (name) VALUES (?)", ("a",))
            raise ValueError("boom")
    assert count_items(connection) == 0

    with connection.transaction():
        connection.execute("INSERT INTO item (name) VALUES (?)", ("b",))
    assert count_items(connection) == 1


def test_misuse_raises_transaction_error(connection):
    with pytest.raises(TransactionError):
        connection.commit()
    with pytest.raises(TransactionError):
        connection.rollback()
    with pytest.raises(TransactionError):
        connection.begin("too_early")

    connection.begin()
    with pytest.raises(TransactionError):
        connection.begin("bad name")
    connection.begin("dup")
    with pytest.raises(TransactionError):
        connection.begin("dup")
    assert connection.transactions.savepoints == ["dup"]
    connection.rollback()
    connection.rollback()


def test_close_forgets_open_transaction(connection):
    connection.begin()
    connection.close()
    assert connection.transaction_depth == 0


class FailOnce(DynamicListener):
    def __init__(self, hook):
        super().__init__()
        self.hook = hook
        self.armed = True

    def handle(self, hook, payload):
        if hook == self.hook and self.armed:
            self.armed = False
            raise RuntimeError(f"{hook} failed")


def next_begin_hooks(connection, recorder):
    recorder.clear()
    connection.begin()
    return recorder.hooks


def test_failing_post_begin_keeps_depth_in_sync(connection, recorder):
    connection.add_listener(FailOnce("post_transaction_begin"))

    with pytest.raises(RuntimeError, match="post_transaction_begin failed"):
        connection.begin()

    assert connection.transaction_depth == 1
    assert connection.raw_connection.in_transaction
    assert next_begin_hooks(connection, recorder) == ["pre_savepoint_create", "post_savepoint_create"]
    connection.rollback()
    connection.rollback()
    assert connection.transaction_depth == 0
    assert not connection.raw_connection.in_transaction


def test_failing_post_commit_inside_block_keeps_committed_state(connection, recorder):
    connection.add_listener(FailOnce("post_transaction_commit"))

    with pytest.raises(RuntimeError, match="post_transaction_commit failed"):
        with connection.transaction():
            connection.execute("INSERT INTO item (name) VALUES (?)", ("a",))

    assert connection.transaction_depth == 0
    assert not connection.raw_connection.in_transaction
    assert count_items(connection) == 1
    assert next_begin_hooks(connection, recorder) == ["pre_transaction_begin", "post_transaction_begin"]
    connection.rollback()


def test_failing_post_savepoint_rollback_keeps_outer_level(connection, recorder):
    connection.add_listener(FailOnce("post_savepoint_rollback"))
    connection.begin()
    connection.begin()

    with pytest.raises(RuntimeError, match="post_savepoint_rollback failed"):
        connection.rollback()

    assert connection.transaction_depth == 1
    assert connection.transactions.savepoints == []
    assert connection.raw_connection.in_transaction
    assert next_begin_hooks(connection, recorder) == ["pre_savepoint_create", "post_savepoint_create"]
    connection.commit()
    connection.commit()
    assert connection.transaction_depth == 0
    assert not connection.raw_connection.in_transaction


def test_failing_pre_commit_rolls_back_block(connection, recorder):
    connection.add_listener(FailOnce("pre_transaction_commit"))

    with pytest.raises(RuntimeError, match="pre_transaction_commit failed"):
        with connection.transaction():
            connection.execute("INSERT INTO item (name) VALUES (?)", ("a",))

    assert recorder.hooks[-2:] == ["pre_transaction_rollback", "post_transaction_rollback"]
    assert connection.transaction_depth == 0
    assert not connection.raw_connection.in_transaction
    assert count_items(connection) == 0


def test_failing_post_begin_in_block_rolls_back(connection):
    connection.add_listener(FailOnce("post_transaction_begin"))

    with pytest.raises(RuntimeError):
        with connection.transaction():
            pytest.fail("block must not run")

    assert connection.transaction_depth == 0
    assert not connection.raw_connection.in_transaction
