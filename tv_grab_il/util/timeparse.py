from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

import pytz
from dateutil import parser as du

from ..parsers.base import ShowRecord

SITE_TZ = "Asia/Jerusalem"
JERUSALEM = pytz.timezone(SITE_TZ)

# the site publishes today plus four days ahead
MAX_DAYS = 5

XMLTV_FMT = "%Y%m%d%H%M%S %z"


def site_today(tz=JERUSALEM) -> date:
    return datetime.now(tz).date()


def day_window(offset: int = 0, days: Optional[int] = None) -> range:
    """Relative day indices to grab; days=None (or 0) means every published day."""
    if offset < 0:
        raise ValueError("offset must be >= 0")
    return range(offset, offset + (days or MAX_DAYS))


def parse_local_time(hhmm: str, day: date, tz=JERUSALEM) -> datetime:
    """Interpret a site wall-clock 'HH:MM' on the given calendar day.
    Returns a timezone-aware datetime in the site zone.
    """
    base = datetime(day.year, day.month, day.day)
    naive = du.parse(hhmm.strip(), default=base).replace(second=0, microsecond=0)
    return tz.localize(naive)


def show_times(record: ShowRecord, day: int, *, today: date, tz=JERUSALEM) -> Tuple[datetime, datetime]:
    """Start/stop for a show listed under relative day `day`.

    The stop time comes from the start plus the listed duration; the
    record's end_time is not consulted.
    """
    start = parse_local_time(record.start_time, today + timedelta(days=day), tz)
    stop = tz.normalize(start + timedelta(minutes=record.duration))
    return start, stop


def format_xmltv_time(dt: datetime) -> str:
    if dt.tzinfo is None:
        raise ValueError("XMLTV times need a UTC offset")
    return dt.strftime(XMLTV_FMT)


def parse_xmltv_time(raw: str) -> datetime:
    return datetime.strptime(raw.strip(), XMLTV_FMT)
