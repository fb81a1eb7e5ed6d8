from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Return the current time as an aware datetime."""
        ...


class UTCClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def http_date(moment: datetime) -> str:
    """Format ``moment`` as an RFC 1123 HTTP-date, e.g. ``Sun, 06 Nov 1994 08:49:37 GMT``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)
