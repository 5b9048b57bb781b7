import calendar
import re
from datetime import date, datetime
import zoneinfo
from app.core.config import settings

_DAY_MONTH_RE = re.compile(r"(?<![\d/])(\d{1,2})/(\d{1,2})(?:/(\d{4}|\d{2}))?(?![\d/])")
_MONTH_RE = re.compile(r"(?<!\w)tháng\s*(\d{1,2})(?!\d)", re.IGNORECASE)
_DAY_RE = re.compile(r"(?<!\w)ngày\s*(\d{1,2})(?!\d)", re.IGNORECASE)

def local_now() -> datetime:
    tz = zoneinfo.ZoneInfo(settings.LOCAL_TIMEZONE)
    return datetime.now(tz)

def format_vi_date(d: date) -> str:
    return f"{d.day:02d}/{d.month:02d}/{d.year}"

def _clamped(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))

def _next_month(d: date, day: int) -> date:
    year, month = (d.year + 1, 1) if d.month == 12 else (d.year, d.month + 1)
    return _clamped(year, month, day)

def strip_date_expressions(text: str) -> str:
    """Blank out dd/mm, "tháng N" and "ngày N" (length-preserving) so their numbers are not read as amounts."""
    for pattern in (_DAY_MONTH_RE, _MONTH_RE, _DAY_RE):
        text = pattern.sub(lambda m: " " * len(m.group(0)), text)
    return text

def resolve_date(text: str, now: datetime | date) -> date:
    """
    Resolve the date a message refers to, relative to `now`.

    - "dd/mm" (or "dd/mm/yyyy") is taken literally, current year by default.
    - "tháng N" sets the month and rolls into next year if that is already past.
    - "ngày N" sets the day and rolls into next month if that is already past.
    When both "tháng" and "ngày" appear, the month is applied first, then the
    day, each with its own roll-forward check. Anything out of range is ignored.
    """
    today = now.date() if isinstance(now, datetime) else now
    text = text or ""

    m = _DAY_MONTH_RE.search(text)
    if m:
        day, month = int(m.group(1)), int(m.group(2))
        year = today.year
        if m.group(3):
            year = int(m.group(3))
            if year < 100:
                year += 2000
        try:
            return date(year, month, day)
        except ValueError:
            return today

    resolved = today

    m = _MONTH_RE.search(text)
    if m and 1 <= int(m.group(1)) <= 12:
        month = int(m.group(1))
        resolved = _clamped(today.year, month, today.day)
        if resolved < today:
            resolved = _clamped(today.year + 1, month, today.day)

    m = _DAY_RE.search(text)
    if m and 1 <= int(m.group(1)) <= 31:
        day = int(m.group(1))
        candidate = _clamped(resolved.year, resolved.month, day)
        if candidate < today:
            candidate = _next_month(candidate, day)
        resolved = candidate

    return resolved
