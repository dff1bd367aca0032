import math


def timestamp_difference(time1: float, time2: float) -> int:
    """Whole seconds between two timestamps, rounded down."""
    return math.floor(abs(time1 - time2))


def is_expired(now: float, timestamp: float, timeout: float) -> bool:
    return timestamp_difference(now, timestamp) > timeout
