"""Metadata timestamps.

Timestamps travel in file metadata as base-16 text of whole seconds since
the Unix epoch.
"""

import time

from ..core.exceptions import InvalidFormatError

TIMESTAMP_BASE = 16


def unix_now() -> int:
    return int(time.time())


def format_timestamp(seconds: int) -> str:
    """Render seconds since the epoch as lowercase hex text."""
    return format(seconds, "x") if seconds >= 0 else "-" + format(-seconds, "x")


def parse_timestamp(value: str) -> int:
    """Parse hex text produced by format_timestamp."""
    try:
        return int(value, TIMESTAMP_BASE)
    except (TypeError, ValueError) as e:
        raise InvalidFormatError(
            f"Invalid timestamp: {value!r}",
            details={"value": value},
        ) from e


def now_timestamp() -> str:
    return format_timestamp(unix_now())

