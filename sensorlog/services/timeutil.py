from __future__ import annotations

import math
from datetime import date, datetime, time, timezone

TimeInput = int | float | str | datetime | date


def parse_timestamp(value: str) -> datetime:
    candidate = value.strip()
    if not candidate:
        raise ValueError("Timestamp is empty.")

    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError(f"Invalid timestamp format: {value!r}") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_unix_timestamp(value: TimeInput) -> int:
    """Normalize a time bound to integer Unix seconds. Naive values are UTC."""
    if isinstance(value, bool):
        raise TypeError("Booleans are not timestamps")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Invalid timestamp: {value!r}")
        return math.floor(value)
    if isinstance(value, datetime):
        moment = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
        return math.floor(moment.timestamp())
    if isinstance(value, date):
        return math.floor(datetime.combine(value, time.min, tzinfo=timezone.utc).timestamp())
    if isinstance(value, str):
        return math.floor(parse_timestamp(value).timestamp())
    raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")
