# bontemp/utils/datetime_utils.py
"""
Central date/time helpers.

Everything in the backend is timezone-aware UTC. Firestore returns
``DatetimeWithNanoseconds`` (a datetime subclass) for timestamp fields,
which these helpers normalize the same way as plain datetimes.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """Date/time helpers shared by the triggers and the API."""

    @staticmethod
    def now() -> datetime:
        """Current time as a UTC timezone-aware datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def to_utc(dt: datetime) -> datetime:
        """Naive datetimes are assumed to be UTC; aware ones are converted."""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def window_start(hours: int = 24, now: Optional[datetime] = None) -> datetime:
        """Lower bound of a trailing window of ``hours`` ending at ``now``."""
        reference = DateTimeUtils.to_utc(now) if now else DateTimeUtils.now()
        return reference - timedelta(hours=hours)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        Parses an ISO 8601 string into a UTC datetime.

        Accepted: 2024-01-15T10:30:00Z, 2024-01-15T10:30:00+01:00,
        2024-01-15T10:30:00.123456Z, 2024-01-15T10:30:00 (treated as UTC)
        """
        try:
            if not iso_string:
                raise ValueError("empty string")
            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'
            return DateTimeUtils.to_utc(dateutil_parser.isoparse(iso_string))
        except Exception as e:
            logger.error(f"ISO datetime parsing failed: {iso_string} - {e}")
            raise ValueError(f"Invalid ISO date: {iso_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """UTC ISO string with a 'Z' suffix."""
        return DateTimeUtils.to_utc(dt).isoformat().replace('+00:00', 'Z')

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Normalizes datetimes read from Firestore, recursing into dicts and lists.
        Values that are not datetimes are returned unchanged.
        """
        if isinstance(obj, datetime):
            return DateTimeUtils.to_utc(obj)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.from_firestore(item) for item in obj]
        return obj

    @staticmethod
    def to_json_safe(obj: Any) -> Any:
        """Replaces datetimes with ISO strings so the value can be printed or returned as JSON."""
        if isinstance(obj, datetime):
            return DateTimeUtils.to_iso_string(obj)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.to_json_safe(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.to_json_safe(item) for item in obj]
        return obj
