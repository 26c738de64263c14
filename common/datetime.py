"""Datetime helpers common to the workflow modules.

Currently provides:
    utcnow(): the default clock, an *aware* UTC datetime.
    iso_millis(dt): ISO-8601 with millisecond precision and a trailing "Z",
        e.g. ``2024-05-01T10:20:30.123Z``.
    file_stamp(dt): ``iso_millis`` with ":" and "." replaced by "-" so the
        result is safe in file names on every platform.
    parse_iso8601(s): robust ISO-8601 parser that always returns an *aware* UTC
        datetime instance. Accepts trailing "Z", offsets such as "+00:00",
        "-0500" (Salesforce style) and fractional seconds.
"""
from __future__ import annotations

import datetime as _dt
import re
from typing import Union

from dateutil.parser import isoparse as _isoparse

__all__ = ["utcnow", "iso_millis", "file_stamp", "parse_iso8601"]

_UNSAFE = re.compile(r"[:.]")


def utcnow() -> _dt.datetime:
    return _dt.datetime.now(tz=_dt.timezone.utc)


def _ensure_utc(dt: _dt.datetime) -> _dt.datetime:
    """Return *dt* converted to UTC and TZ-aware."""
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        # naive → assume already UTC
        return dt.replace(tzinfo=_dt.timezone.utc)
    return dt.astimezone(_dt.timezone.utc)


def iso_millis(value: _dt.datetime) -> str:
    dt = _ensure_utc(value)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def file_stamp(value: _dt.datetime) -> str:
    return _UNSAFE.sub("-", iso_millis(value))


def parse_iso8601(value: Union[str, _dt.datetime]) -> _dt.datetime:
    """Parse *value* into a timezone-aware UTC datetime.

    Accepts ISO-8601 strings or datetime objects. If *value* is already a
    datetime, it will be normalised to UTC.
    """
    if isinstance(value, _dt.datetime):
        return _ensure_utc(value)

    if not isinstance(value, str):
        raise TypeError("parse_iso8601 expects str or datetime, got " + type(value).__name__)

    try:
        dt = _isoparse(value)
    except Exception as exc:  # pragma: no cover – caller will decide
        raise ValueError(f"invalid ISO-8601 datetime: {value}") from exc

    return _ensure_utc(dt)
