import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from huehunt.errors import InvalidTimezoneOffset

MIN_OFFSET_HOURS = -12
MAX_OFFSET_HOURS = 14

_OFFSET_RE = re.compile(r'^([+-])(\d{1,2}):?(\d{2})?$')
_NUMBER_PREFIX_RE = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')


def parse_timezone_offset(value) -> float:
    """Turn a client-supplied offset into hours from UTC.

    Accepts numbers, numeric strings ("5.5", "-8") and "+05:30" / "-0800"
    forms. Otherwise the leading numeric prefix is used ("5abc" is 5), and
    anything without one falls back to UTC (0).
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        offset = float(value)
    else:
        text = str(value).strip()
        match = _OFFSET_RE.match(text)
        if match:
            sign = 1 if match.group(1) == '+' else -1
            minutes = int(match.group(3)) if match.group(3) else 0
            offset = sign * (int(match.group(2)) + minutes / 60)
        else:
            prefix = _NUMBER_PREFIX_RE.match(text)
            if prefix is None:
                return 0.0
            offset = float(prefix.group(0))
    if offset != offset:  # NaN
        return 0.0
    validate_offset(offset)
    return offset


def validate_offset(offset_hours: float) -> None:
    if not MIN_OFFSET_HOURS <= offset_hours <= MAX_OFFSET_HOURS:
        raise InvalidTimezoneOffset(
            f"Timezone offset {offset_hours:g}h outside [{MIN_OFFSET_HOURS}, {MAX_OFFSET_HOURS}]"
        )


def local_now(offset_hours: float, now: Optional[datetime] = None) -> datetime:
    """Wall-clock time for a UTC offset, expressed as a naive datetime."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.replace(tzinfo=None) + timedelta(hours=offset_hours)


def local_day_key(offset_hours: float, now: Optional[datetime] = None) -> str:
    """Local calendar date for the offset, formatted YYYY-MM-DD."""
    return local_now(offset_hours, now).strftime('%Y-%m-%d')
