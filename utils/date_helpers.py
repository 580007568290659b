from datetime import date, datetime, timedelta, timezone
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT, WEEKDAY_NAMES, WEEKDAY_PREFIX


def today() -> date:
    return date.today()


def today_str() -> str:
    return date.today().strftime(DATE_FORMAT)


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str.strip(), fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def parse_month(month_str: str) -> date | None:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str:
        return None
    try:
        return datetime.strptime(month_str, MONTH_FORMAT).date()
    except ValueError:
        return None


def month_bounds(d: date) -> tuple[date, date]:
    """Return (first_day, last_day) of the calendar month containing d."""
    last_day = calendar.monthrange(d.year, d.month)[1]
    return d.replace(day=1), d.replace(day=last_day)


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def short_month_label(d: date) -> str:
    """e.g. '3月'."""
    return f"{d.month}月"


def weekday_name(d: date) -> str:
    """e.g. '星期一'."""
    return WEEKDAY_PREFIX + WEEKDAY_NAMES[d.weekday()]


def friendly_date(date_str: str, ref: date | None = None) -> str:
    """Day-group heading: '今天', '昨天', or e.g. '1月15日 星期一'."""
    d = parse_date(date_str)
    if d is None:
        return date_str
    ref = ref or today()
    if d == ref:
        return "今天"
    if d == ref - timedelta(days=1):
        return "昨天"
    return f"{d.month}月{d.day}日 {weekday_name(d)}"


# ── Timestamps ────────────────────────────────────────────────────────────────

def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision and a 'Z' suffix,
    e.g. '2024-01-15T12:00:00.000Z'. Naive values are read as local time."""
    dt = dt.astimezone(timezone.utc)
    return dt.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-like timestamp ('2024-01-15T12:00:00.000Z',
    '2024-01-15 12:30', '2024/01/15 12:30'). Returns None on failure.
    The result keeps whatever tzinfo the text carried (may be naive)."""
    if not value:
        return None
    text = value.strip().replace("/", "-")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def timestamp_sort_key(value: str) -> float:
    """POSIX seconds for ordering; naive values are read as local time,
    unparseable values sort before everything else."""
    dt = parse_timestamp(value)
    if dt is None:
        return float("-inf")
    return dt.timestamp()


def to_local(dt: datetime) -> datetime:
    """Convert aware timestamps to local wall-clock time; naive ones pass through."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone()
