"""
Ordered collections of records.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, List, Sequence, Type, TypeVar

from ..events.hooks import Hook
from ..utils.naming import quote_identifier
from .record import Record

if TYPE_CHECKING:
    from ..connection import InstrumentedConnection

TRecord = TypeVar("TRecord", bound=Record)


class RecordCollection(Sequence[TRecord]):
    """
    Records of a single class, in load order.

    Collection hooks go to the record class listener.
    """

    def __init__(self, record_cls: Type[TRecord], records: Iterable[TRecord] = ()) -> None:
        self.record_cls = record_cls
        self._records: List[TRecord] = list(records)

    def __getitem__(self, index):
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TRecord]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"<RecordCollection {self.record_cls.__name__} x{len(self._records)}>"

    def append(self, record: TRecord) -> None:
        if not isinstance(record, self.record_cls):
            raise TypeError(
                f"Expected {self.record_cls.__name__}, got {type(record).__name__}."
            )
        self._records.append(record)

    def primary_keys(self) -> List[object]:
        return [record.pk for record in self._records]

    def delete(self, connection: "InstrumentedConnection") -> int:
        """
        Delete every record by primary key inside a single transaction.

        Records without a primary key value were never stored and are only
        dropped from the collection. Returns the number of deleted rows.
        """
        record_cls = self.record_cls
        record_cls.dispatch_hook(Hook.ON_PRE_COLLECTION_DELETE, self)
        sql = (
            f"DELETE FROM {quote_identifier(record_cls.__tablename__)} "
            f"WHERE {quote_identifier(record_cls.__primary_key__)} = ?"
        )
        deleted = 0
        with connection.transaction():
            for record in self._records:
                if record.pk is None:
                    continue
                deleted += connection.execute(sql, (record.pk,))
        self._records.clear()
        record_cls.dispatch_hook(Hook.ON_COLLECTION_DELETE, self)
        return deleted
