from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterator
from zoneinfo import ZoneInfo

from allowance.core.config import settings
from allowance.core.errors import ValidationError

REFERENCE_TZ = ZoneInfo(settings.reference_timezone)

# Days are zero-padded ISO strings so that string order == calendar order.
_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def now_reference() -> datetime:
    return datetime.now(tz=REFERENCE_TZ)


def today_reference() -> str:
    return now_reference().date().isoformat()


def parse_day(value) -> str:
    if value is None:
        raise ValidationError("date_invalid")
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    v = str(value).strip()
    if not _DAY_RE.match(v):
        raise ValidationError("date_invalid")
    try:
        date.fromisoformat(v)
    except ValueError:
        raise ValidationError("date_invalid")
    return v


def iter_days(start: str, end: str) -> Iterator[str]:
    if start > end:
        return
    d = date.fromisoformat(start)
    last = date.fromisoformat(end)
    while d <= last:
        yield d.isoformat()
        d = d + timedelta(days=1)
