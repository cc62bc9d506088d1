"""
Minimal record objects reporting their lifecycle to a class-level listener.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Mapping, Optional, Type, TypeVar

from ..events.hooks import Hook
from ..listeners import ListenerChain, attach_listener
from ..utils.naming import camel_to_snake, is_identifier


class RecordConfigurationError(Exception):
    """Raised when a record class is misconfigured."""


TRecord = TypeVar("TRecord", bound="Record")


class Record:
    """
    Attribute container mapped to one table row.

    Class-level configuration uses dunder names so it never collides with
    column attributes:

    * ``__tablename__``: table name, derived from the class name when omitted;
    * ``__primary_key__``: primary key column, ``"id"`` by default;
    * ``__listener__``: listener receiving record and collection hooks.
    """

    __tablename__: ClassVar[str] = ""
    __primary_key__: ClassVar[str] = "id"
    __listener__: ClassVar[Any] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.__dict__.get("__tablename__"):
            cls.__tablename__ = camel_to_snake(cls.__name__)
        for option in (cls.__tablename__, cls.__primary_key__):
            if not is_identifier(option):
                raise RecordConfigurationError(
                    f"Record '{cls.__name__}' uses invalid identifier {option!r}."
                )

    def __init__(self, **values: Any) -> None:
        self.__dict__.update(values)

    def __repr__(self) -> str:
        field_parts = ", ".join(f"{name}={value!r}" for name, value in self.to_dict().items())
        return f"<{self.__class__.__name__} {field_parts}>"

    @property
    def pk(self) -> Any:
        return self.__dict__.get(self.__primary_key__)

    def to_dict(self) -> Dict[str, Any]:
        return {name: value for name, value in self.__dict__.items() if not name.startswith("_")}

    # Loading -------------------------------------------------------------
    @classmethod
    def hydrate(cls: Type[TRecord], row: Mapping[str, Any]) -> TRecord:
        """
        Build a record from a database row.

        ``on_pre_load`` sees the record before any column is set and
        ``on_load`` sees it fully populated. ``__init__`` is not called.
        """
        record = cls.__new__(cls)
        cls.dispatch_hook(Hook.ON_PRE_LOAD, record)
        record.__dict__.update(dict(row))
        cls.dispatch_hook(Hook.ON_LOAD, record)
        return record

    # Serialization -------------------------------------------------------
    def __getstate__(self) -> Dict[str, Any]:
        self.dispatch_hook(Hook.ON_SLEEP, self)
        return dict(self.__dict__)

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self.__dict__.update(state)
        self.dispatch_hook(Hook.ON_WAKE_UP, self)

    # Listeners -----------------------------------------------------------
    @classmethod
    def dispatch_hook(cls, hook: Hook, payload: Any) -> None:
        listener = cls.__listener__
        if listener is not None:
            getattr(listener, hook.value)(payload)

    @classmethod
    def attach_listener(cls, listener: Any, name: Optional[str] = None) -> None:
        """
        Add ``listener`` for this record class.

        A listener inherited from a parent class is wrapped in a new chain
        instead of being extended, so the parent's listeners stay untouched.
        """
        own = cls.__dict__.get("__listener__")
        if own is None and cls.__listener__ is not None:
            own = ListenerChain()
            own.add(cls.__listener__)
        cls.__listener__ = attach_listener(own, listener, name)
