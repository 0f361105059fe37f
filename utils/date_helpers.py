from datetime import date, datetime
import calendar
from utils.constants import DATE_FORMAT, TIMESTAMP_FORMAT

# ── Display date format options ───────────────────────────────────────────────

DATE_FORMAT_OPTIONS = ["MM/DD/YYYY", "DD/MM/YYYY", "YYYY-MM-DD", "DD.MM.YYYY"]

_STRFTIME_MAP = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
}


def today() -> date:
    return date.today()


def now() -> datetime:
    return datetime.now().replace(microsecond=0)


def parse_date(date_str: str | None) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str[:10], fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date | None) -> str | None:
    return d.strftime(DATE_FORMAT) if d else None


def format_timestamp(dt: datetime) -> str:
    return dt.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(ts: str | None) -> datetime | None:
    if not ts:
        return None
    try:
        return datetime.strptime(ts[:19], TIMESTAMP_FORMAT)
    except ValueError:
        d = parse_date(ts)
        return datetime(d.year, d.month, d.day) if d else None


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    return min(day, days_in_month(year, month))


def clamped_date(year: int, month: int, day: int) -> date:
    return date(year, month, clamp_day_to_month(year, month, day))


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def friendly_month(year: int, month: int) -> str:
    """e.g. 'February 2026'."""
    return date(year, month, 1).strftime("%B %Y")


def format_display_date(date_str: str | None, fmt_key: str = "MM/DD/YYYY") -> str:
    """Convert a YYYY-MM-DD storage string to the user-facing display format."""
    if not date_str:
        return ""
    d = parse_date(date_str)
    if d is None:
        return date_str
    return d.strftime(_STRFTIME_MAP.get(fmt_key, "%m/%d/%Y"))


def parse_display_date(display_str: str | None, fmt_key: str = "MM/DD/YYYY") -> date | None:
    """Parse user input in the display format, falling back to ISO."""
    if not display_str or not display_str.strip():
        return None
    try:
        return datetime.strptime(
            display_str.strip(), _STRFTIME_MAP.get(fmt_key, "%m/%d/%Y")
        ).date()
    except ValueError:
        return parse_date(display_str.strip())
