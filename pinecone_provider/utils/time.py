"""Time utilities for timestamps. All datetimes in UTC."""

from datetime import datetime, timezone

# RFC 850 layout, e.g. "Monday, 02-Jan-06 15:04:05 UTC"
RFC850_FORMAT = "%A, %d-%b-%y %H:%M:%S %Z"


def utc_now() -> datetime:
    """Return current UTC datetime. Use for last_updated."""
    return datetime.now(timezone.utc)


def format_rfc850(moment: datetime) -> str:
    """Format an aware datetime in RFC 850 layout, converted to UTC."""
    return moment.astimezone(timezone.utc).strftime(RFC850_FORMAT)
