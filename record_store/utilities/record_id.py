import os
import time
import uuid
from typing import Optional, Union

# nil uuid, the parent of every chain head
SENTINEL = uuid.UUID(int=0)

_RAND_B_MASK = (1 << 62) - 1


def now_ns() -> int:
    return time.time_ns()


def new_record_id(unix_ts_ms: Optional[int] = None) -> uuid.UUID:
    """Generate a UUIDv7: 48 bit millisecond timestamp followed by random bits.

    Ids created later sort after ids created earlier (at millisecond
    resolution), which keeps primary key inserts sequential.

    Args:
        unix_ts_ms (int, optional): milliseconds since the epoch, defaults to now
    """
    if unix_ts_ms is None:
        unix_ts_ms = time.time_ns() // 1_000_000
    rand = int.from_bytes(os.urandom(10), "big")

    value = (unix_ts_ms & 0xFFFFFFFFFFFF) << 80
    value |= 0x7 << 76
    value |= ((rand >> 62) & 0xFFF) << 64
    value |= 0b10 << 62
    value |= rand & _RAND_B_MASK
    return uuid.UUID(int=value)


def id_timestamp_ms(record_id: uuid.UUID) -> int:
    """milliseconds embedded in a UUIDv7"""
    return record_id.int >> 80


def as_uuid(value: Union[uuid.UUID, str, None]) -> uuid.UUID:
    """accept a UUID or its string form; None maps to the sentinel"""
    if value is None:
        return SENTINEL
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))
