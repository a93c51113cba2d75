"""Paired SigV4 timestamps taken from a single clock read."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

LONG_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
SHORT_DATE_FORMAT = "%Y%m%d"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: the current time in UTC."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Dates:
    """Long (``YYYYMMDDTHHMMSSZ``) and short (``YYYYMMDD``) request dates.

    Both strings always come from the same instant, so the date sent in
    ``X-Amz-Date`` and the date inside the credential scope cannot disagree
    across a midnight rollover.
    """

    long: str
    short: str

    @classmethod
    def from_datetime(cls, moment: datetime) -> "Dates":
        """Snapshot a datetime. Naive values are taken to already be UTC."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        else:
            moment = moment.astimezone(timezone.utc)
        return cls(
            long=f"{moment.year:04d}{moment.month:02d}{moment.day:02d}T"
            f"{moment.hour:02d}{moment.minute:02d}{moment.second:02d}Z",
            short=f"{moment.year:04d}{moment.month:02d}{moment.day:02d}",
        )

    @classmethod
    def from_long_date(cls, long_date: str) -> "Dates":
        """Build from an existing ``YYYYMMDDTHHMMSSZ`` timestamp.

        Raises:
            ValueError: If ``long_date`` is not in that format.
        """
        moment = datetime.strptime(long_date, LONG_DATE_FORMAT)
        return cls.from_datetime(moment)

    @classmethod
    def now(cls, clock: Clock = utc_now) -> "Dates":
        """Read ``clock`` once and snapshot the result."""
        return cls.from_datetime(clock())
