"""Travel history models: records, periods, and tax-year windows."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TravelEventType(str, Enum):
    """Event literal used in I-94 travel history exports."""

    ARRIVAL = "Arrival"
    DEPARTURE = "Departure"


class TravelRecord(BaseModel):
    """A single validated line from a travel history export."""

    event_date: date
    event_type: TravelEventType
    location: str = Field(default="", description="Port of entry (informational)")
    row: str = Field(default="", description="Row label from the export")

    model_config = ConfigDict(frozen=True)


class TravelPeriod(BaseModel):
    """
    Physical presence from arrival through departure, both days inclusive.

    A missing arrival means the person was already present before the
    relevant years. A missing departure means they are still present.
    """

    arrival_date: date | None = Field(default=None, description="First day present")
    departure_date: date | None = Field(default=None, description="Last day present")

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @property
    def is_empty(self) -> bool:
        """Both endpoints missing; such a period carries no information."""
        return self.arrival_date is None and self.departure_date is None

    @property
    def sort_date(self) -> date:
        """Date used to order periods for display."""
        return self.arrival_date or self.departure_date or date.min

    def _bounds(self) -> tuple[date, date]:
        # Open ends stand in for -inf / +inf
        return (self.arrival_date or date.min, self.departure_date or date.max)

    def overlaps(self, other: "TravelPeriod") -> bool:
        """
        Check whether two periods share any time.

        A departure on the same day as the other period's arrival is a
        turnaround, not an overlap.

        Args:
            other: Period to compare against

        Returns:
            True if the periods overlap
        """
        if self.is_empty or other.is_empty:
            return False

        start_a, end_a = self._bounds()
        start_b, end_b = other._bounds()

        if end_a == start_b or end_b == start_a:
            return False

        return max(start_a, start_b) < min(end_a, end_b)

    def describe(self) -> str:
        """Human-readable rendering used in warnings."""
        if self.arrival_date and self.departure_date:
            return f"{self.arrival_date.isoformat()} to {self.departure_date.isoformat()}"
        if self.arrival_date:
            return f"{self.arrival_date.isoformat()} to present (no departure)"
        if self.departure_date:
            return f"unknown arrival to {self.departure_date.isoformat()} (no arrival)"
        return "invalid range"

    def span_days(self) -> int | None:
        """Inclusive number of calendar days, or None for open-ended periods."""
        if self.arrival_date is None or self.departure_date is None:
            return None
        return (self.departure_date - self.arrival_date).days + 1


def sort_newest_first(periods: list[TravelPeriod]) -> list[TravelPeriod]:
    """Return periods ordered by arrival (or departure) date, newest first."""
    return sorted(periods, key=lambda p: p.sort_date, reverse=True)


def is_leap_year(year: int) -> bool:
    """Gregorian leap year rule."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_year(year: int) -> int:
    """Number of days in a calendar year."""
    return 366 if is_leap_year(year) else 365


class YearWindow(BaseModel):
    """Calendar-year window [Jan 1, Dec 31] used for day counting."""

    year: int
    start: date
    end: date

    model_config = ConfigDict(frozen=True)

    @classmethod
    def for_year(cls, year: int) -> "YearWindow":
        return cls(year=year, start=date(year, 1, 1), end=date(year, 12, 31))

    @property
    def length(self) -> int:
        return days_in_year(self.year)


def tax_year_windows(tax_year: int) -> tuple[YearWindow, YearWindow, YearWindow]:
    """
    Get the three year windows the test looks at.

    Args:
        tax_year: Year being evaluated

    Returns:
        (current, first prior, second prior) windows
    """
    return (
        YearWindow.for_year(tax_year),
        YearWindow.for_year(tax_year - 1),
        YearWindow.for_year(tax_year - 2),
    )
