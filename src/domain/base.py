import json
from datetime import UTC, datetime

from sqlalchemy.types import Text, TypeDecorator


def utc_now() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns"""
    return datetime.now(UTC).replace(tzinfo=None)


class JSONText(TypeDecorator):
    """
    JSON value stored as serialized TEXT.

    Any JSON-representable value (object, array, string, number, bool)
    is dumped on write and parsed back on read, so callers always see
    structured data. Python None is stored as SQL NULL.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return json.loads(value)
