from datetime import date, datetime, timedelta
import calendar
from utils.constants import DATE_FORMAT


def today() -> date:
    return date.today()


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def month_key(year: int, month: int) -> str:
    return f"{year}-{month:02d}"


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return (first_day, last_day) of the given month, both inclusive."""
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


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


def add_years(d: date, n: int) -> date:
    """Add n years to date d; Feb 29 becomes Feb 28 in common years."""
    return add_months(d, 12 * n)


def shift_date(d: date, frequency: str, steps: int) -> date:
    """Return d moved `steps` frequency units forward.

    Always computed from d itself, so a Jan 31 start keeps landing on the
    last day of short months and returns to the 31st when it can.
    """
    if frequency == "daily":
        return d + timedelta(days=steps)
    if frequency == "weekly":
        return d + timedelta(weeks=steps)
    if frequency == "monthly":
        return add_months(d, steps)
    if frequency == "yearly":
        return add_years(d, steps)
    raise ValueError(f"Invalid frequency: {frequency}")


def friendly_month(year: int, month: int) -> str:
    """Convert (2026, 2) to e.g. 'February 2026'."""
    return date(year, month, 1).strftime("%B %Y")
