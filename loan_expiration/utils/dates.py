# file: loan_expiration/utils/dates.py

from datetime import datetime, timezone

from loan_expiration.errors import DateParseError

RETURN_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
DUE_DATE_DISPLAY_FORMAT = "%d/%m/%Y"
SECONDS_PER_DAY = 86400


def parse_return_date(value: str, loan_id: str = "") -> datetime:
    """Parse a loan return date such as '2024-01-05T00:00:00.000000Z' as UTC."""
    try:
        parsed = datetime.strptime(value, RETURN_DATE_FORMAT)
    except (TypeError, ValueError) as exc:
        raise DateParseError(value, loan_id) from exc
    return parsed.replace(tzinfo=timezone.utc)


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def days_until(return_date: datetime, now: datetime) -> float:
    return (as_utc(return_date) - as_utc(now)).total_seconds() / SECONDS_PER_DAY


def format_due_date(return_date: datetime) -> str:
    return return_date.strftime(DUE_DATE_DISPLAY_FORMAT)
