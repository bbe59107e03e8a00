# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Date coercion helpers.

Date handling is a tri-state option shared by parsing and serialization:

  * ``False`` / ``None`` -> inactive
  * ``True`` / ``"iso"`` -> ISO-8601 text (``2023-01-01T10:00:00.000Z``)
  * ``"timestamp"``      -> integer epoch milliseconds

Naive datetimes are interpreted as UTC, and ``date`` values as midnight UTC.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, Optional, Union


class DateMode(str, Enum):
    ISO = "iso"
    TIMESTAMP = "timestamp"


DatesOption = Union[bool, str, DateMode, None]

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

ISO_DATE_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d{1,3}))?"
    r"(Z|[+-]\d{2}:\d{2})?\Z",
    re.ASCII,
)


def resolve_date_mode(option: DatesOption) -> Optional[DateMode]:
    """Turn the user facing ``dates`` option into an active mode or None."""
    if option is None or option is False:
        return None
    if option is True:
        return DateMode.ISO
    if isinstance(option, DateMode):
        return option
    if isinstance(option, str):
        try:
            return DateMode(option.strip().lower())
        except ValueError:
            pass
    raise ValueError(f"Invalid dates option: {option!r}. Expected True, False, 'iso' or 'timestamp'")


def is_temporal(value: Any) -> bool:
    return isinstance(value, date)


def _as_utc(value: date) -> datetime:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(0), tzinfo=timezone.utc)
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: date) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    dt = _as_utc(value)
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}.{dt.microsecond // 1000:03d}Z"
    )


def to_timestamp(value: date) -> int:
    """Epoch milliseconds, truncated toward negative infinity."""
    return (_as_utc(value) - EPOCH) // timedelta(milliseconds=1)


def serialize_date(value: date, mode: Optional[DateMode]) -> Union[str, int]:
    if mode is DateMode.TIMESTAMP:
        return to_timestamp(value)
    return to_iso(value)


def parse_iso(text: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp string, or return None.

    Strings without an offset are read as UTC.
    """
    m = ISO_DATE_PATTERN.match(text)
    if m is None:
        return None

    year, month, day, hour, minute, second = (int(g) for g in m.groups()[:6])
    fraction, zone = m.group(7), m.group(8)
    millis = int(fraction.ljust(3, "0")) if fraction else 0

    if not zone or zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if hours > 23 or minutes > 59:
            return None
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))

    try:
        return datetime(year, month, day, hour, minute, second, millis * 1000, tzinfo=tz)
    except ValueError:
        return None
