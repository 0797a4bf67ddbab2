"""Date windows and timestamp parsing shared by the collector and reports."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta


def parse_timestamp(value) -> datetime | None:
    """Parse an upstream ISO 8601 timestamp (date-only allowed).

    Naive values are taken as UTC. Anything unparsable yields ``None``.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def _as_datetime(bound: date | datetime) -> datetime:
    if isinstance(bound, datetime):
        return bound if bound.tzinfo is not None else bound.replace(tzinfo=UTC)
    return datetime.combine(bound, time.min, tzinfo=UTC)


def _years_back(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return moment.replace(year=moment.year - years, day=28)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive window from the start of one day to the end of another.

    Bounds keep the timezone they were given in, so "a day" is a day in the
    viewer's timezone.
    """

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Window start {self.start.isoformat()} is after end {self.end.isoformat()}")

    @classmethod
    def from_bounds(cls, start: date | datetime, end: date | datetime) -> "DateWindow":
        return cls(start=start_of_day(_as_datetime(start)), end=end_of_day(_as_datetime(end)))

    def widened(self, years: int = 1) -> "DateWindow":
        """Same end, start moved back ``years`` calendar years."""
        return DateWindow(start=_years_back(self.start, years), end=self.end)

    def contains(self, moment: datetime | None) -> bool:
        if moment is None:
            return False
        return self.start <= moment <= self.end

    @property
    def days(self) -> int:
        return (self.end.date() - self.start.date()).days + 1

    def __str__(self) -> str:
        return f"{self.start.date().isoformat()}..{self.end.date().isoformat()}"


ONE_DAY = timedelta(days=1)
