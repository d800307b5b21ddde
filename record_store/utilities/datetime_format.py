from datetime import datetime, timezone


def utcnow() -> datetime:
    """timezone aware current time, used for server assigned columns"""
    return datetime.now(timezone.utc)


def format_ns(timestamp_ns: int) -> str:
    """render a nanosecond unix timestamp as ISO 8601 with the nanoseconds kept"""
    seconds, nanos = divmod(timestamp_ns, 1_000_000_000)
    stamp = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return "{}.{:09d}Z".format(stamp.strftime("%Y-%m-%dT%H:%M:%S"), nanos)
