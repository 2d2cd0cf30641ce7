"""Normalization of last-use timestamps.

Hosts report a profile's last-use time in whatever shape their
management stack produces: FILETIME tick counts, WMI CIM_DATETIME
strings, or formatted date strings. ``normalize_timestamp`` turns any of
these into an aware UTC datetime, or None when the value cannot be
interpreted. It never raises.
"""

import logging
import re
from datetime import UTC, datetime, timedelta, timezone

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# FILETIME counts 100ns intervals since this instant
FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=UTC)

# CIM_DATETIME: yyyymmddHHMMSS.ffffff followed by a signed UTC offset in minutes
_CIM_DATETIME = re.compile(r"^(\d{14})\.(\d{6})([+-])(\d{3})$", re.ASCII)

_DIGITS = re.compile(r"\d+", re.ASCII)


def normalize_timestamp(value: object) -> datetime | None:
    """Convert a last-use value of unknown provenance to UTC.

    Interpretation order:

    1. ``datetime``: converted to UTC (naive values are taken as UTC).
    2. Integer or digit-only string: FILETIME ticks.
    3. CIM_DATETIME string (``20240115103000.000000+060``).
    4. Any other string: general date parsing.

    Args:
        value: Raw value reported by a host.

    Returns:
        Aware UTC datetime, or None if the value is unknown or malformed.
    """
    if isinstance(value, datetime):
        return _as_utc(value)

    # bool is an int subclass but never a timestamp
    if isinstance(value, bool):
        return None

    try:
        return _interpret(value)
    except (ValueError, OverflowError, TypeError) as e:
        logger.debug("Unparseable timestamp %r: %s", value, e)
        return None


def _interpret(value: object) -> datetime | None:
    """Apply the FILETIME, CIM_DATETIME and free-form rules in order."""
    if isinstance(value, int):
        return from_filetime(value)

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    # ASCII only: str.isdigit also accepts superscripts int() rejects
    if _DIGITS.fullmatch(text):
        return from_filetime(int(text))

    # Unset CIM_DATETIME fields are filled with asterisks
    if "*" in text:
        return None

    match = _CIM_DATETIME.match(text)
    if match is not None:
        return _from_cim_datetime(*match.groups())

    return _as_utc(date_parser.parse(text))


def from_filetime(ticks: int) -> datetime | None:
    """Convert a FILETIME tick count to a UTC datetime.

    Args:
        ticks: 100-nanosecond intervals since 1601-01-01 UTC.

    Returns:
        UTC datetime, or None for zero, negative, or out-of-range values.
    """
    # Zero is how Windows reports "never"
    if ticks <= 0:
        return None
    try:
        return FILETIME_EPOCH + timedelta(microseconds=ticks // 10)
    except OverflowError:
        logger.debug("FILETIME value out of range: %d", ticks)
        return None


def to_filetime(moment: datetime) -> int:
    """Convert a datetime to FILETIME ticks (naive values are taken as UTC)."""
    delta = _as_utc(moment) - FILETIME_EPOCH
    return (delta // timedelta(microseconds=1)) * 10


def _from_cim_datetime(stamp: str, fraction: str, sign: str, offset: str) -> datetime | None:
    """Decode the parts of a CIM_DATETIME string."""
    minutes = int(offset) if sign == "+" else -int(offset)
    try:
        local = datetime.strptime(stamp, "%Y%m%d%H%M%S")
        zone = timezone(timedelta(minutes=minutes))
        return local.replace(microsecond=int(fraction), tzinfo=zone).astimezone(UTC)
    except (ValueError, OverflowError) as e:
        logger.debug("Invalid CIM datetime %s.%s%s%s: %s", stamp, fraction, sign, offset, e)
        return None


def _as_utc(moment: datetime) -> datetime:
    """Return ``moment`` in UTC, treating naive values as already UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)
