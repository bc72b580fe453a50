from datetime import datetime, timezone
from typing import Optional

POINT_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y",
)


def parse_point_date(value) -> Optional[datetime]:
    """
    Parse a historical data point date into a comparable naive UTC datetime.

    Tries `datetime.fromisoformat` first, then the formats in POINT_DATE_FORMATS.
    Aware datetimes are converted to UTC and stripped of tzinfo so that
    values of mixed awareness can be compared with each other.

    Args:
        value: Date string (e.g. "2024-01-31") or a datetime.

    Returns:
        Naive datetime, or None if the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value).strip()
        if not s:
            return None
        dt = None
        try:
            dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            for fmt in POINT_DATE_FORMATS:
                try:
                    dt = datetime.strptime(s, fmt)
                    break
                except ValueError:
                    pass
        if dt is None:
            return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt
