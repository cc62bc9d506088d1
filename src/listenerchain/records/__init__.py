"""
Records and record collections driving the record and collection hooks.
"""

from .collection import RecordCollection
from .record import Record, RecordConfigurationError

__all__ = ["Record", "RecordCollection", "RecordConfigurationError"]
