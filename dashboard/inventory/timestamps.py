"""
Decoding of inventory-log creation times.

The backend sends ``createdAt`` either as a Java-style component array
``[year, month, day, hour, minute, second, nanos]`` (month 1-based) or as
an already parseable scalar. Both are turned into a UTC ISO-8601 instant
with millisecond precision. Components are always read as UTC.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from numbers import Real
from typing import Any, Optional, Union

from django.utils.dateparse import parse_date, parse_datetime


@dataclass(frozen=True)
class ArrayForm:
    year: Any
    month: Any
    day: Any
    hour: Any = 0
    minute: Any = 0
    second: Any = 0
    nanos: Any = 0


@dataclass(frozen=True)
class ScalarForm:
    value: Any


BackendTimestamp = Union[ArrayForm, ScalarForm]

_MISSING = object()


def timestamp_from_wire(value) -> Optional[BackendTimestamp]:
    """Tag a raw JSON ``createdAt`` value; None stays None"""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        fields = [item if item is not None else 0 for item in value[:7]]
        if len(fields) < 3:
            fields += [_MISSING] * (3 - len(fields))
        return ArrayForm(*fields)
    return ScalarForm(value)


def format_instant(moment: datetime) -> str:
    """Canonical UTC form, e.g. 2024-03-05T14:30:00.500Z"""
    moment = moment.astimezone(timezone.utc)
    millis = moment.microsecond // 1000
    # %Y is not zero-padded below year 1000 on every platform
    return f"{moment.year:04d}-{moment:%m-%dT%H:%M:%S}.{millis:03d}Z"


def _as_int(value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f'timestamp component must be an integer, got {value!r}')
    return value


def _decode_array(ts: ArrayForm) -> Optional[datetime]:
    try:
        millis = _as_int(ts.nanos) // 1_000_000
        return datetime(
            _as_int(ts.year),
            # 1-based on the wire, same as datetime
            _as_int(ts.month),
            _as_int(ts.day),
            _as_int(ts.hour),
            _as_int(ts.minute),
            _as_int(ts.second),
            millis * 1000,
            tzinfo=timezone.utc,
        )
    except (TypeError, ValueError, OverflowError):
        return None


def _decode_scalar(ts: ScalarForm) -> Optional[datetime]:
    value = ts.value
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        # Numeric scalars are epoch milliseconds.
        try:
            return datetime.fromtimestamp(float(value) / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        try:
            moment = parse_datetime(text)
            if moment is None:
                day = parse_date(text)
                moment = datetime.combine(day, time.min) if day else None
        except ValueError:
            return None
        if moment is None:
            return None
    else:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def decode_timestamp(ts: Optional[BackendTimestamp]) -> Optional[str]:
    """
    Decode a BackendTimestamp to an ISO-8601 UTC string.

    Returns None for missing input, impossible calendar values and
    unparseable scalars. Never raises.
    """
    if ts is None:
        return None
    if isinstance(ts, ArrayForm):
        moment = _decode_array(ts)
    elif isinstance(ts, ScalarForm):
        moment = _decode_scalar(ts)
    else:
        return None
    if moment is None:
        return None
    try:
        return format_instant(moment)
    except (ValueError, OverflowError):
        return None
