"""Input validation for manually entered periods and day counts.

These checks run before anything reaches the day counter or the
evaluator, which assume their inputs are already consistent.
"""

import re
from datetime import date

from spt_calc.models.results import DayCounts
from spt_calc.models.travel import TravelPeriod, sort_newest_first
from spt_calc.tools.spt_calculations import max_days_for_year

ISO_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class PeriodValidationError(ValueError):
    """A manually entered travel period was rejected."""


class DayCountValidationError(ValueError):
    """One or more manually entered day counts are out of range."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))


def parse_date(value: str) -> date:
    """
    Parse a strict YYYY-MM-DD date.

    Args:
        value: Date string

    Returns:
        The parsed date

    Raises:
        PeriodValidationError: If the value is not a valid calendar date
    """
    value = value.strip()
    if not ISO_DATE_PATTERN.fullmatch(value):
        raise PeriodValidationError(f"Invalid date: {value} (expected YYYY-MM-DD)")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise PeriodValidationError(f"Invalid date: {value}") from e


def validate_new_period(
    arrival: date | None,
    departure: date | None,
    existing: list[TravelPeriod],
    no_arrival: bool = False,
    no_departure: bool = False,
) -> TravelPeriod:
    """
    Validate a period before adding it to an existing set.

    Args:
        arrival: Arrival date, or None
        departure: Departure date, or None
        existing: Periods already accepted
        no_arrival: The user states they were present before all records
        no_departure: The user states they are still present

    Returns:
        The validated TravelPeriod

    Raises:
        PeriodValidationError: With a message suitable for the user
    """
    if not no_arrival and arrival is None:
        raise PeriodValidationError("Please select an arrival date or check 'No arrival'")

    if not no_departure and departure is None:
        raise PeriodValidationError("Please select a departure date or check 'No departure'")

    if no_arrival:
        arrival = None
    if no_departure:
        departure = None

    if arrival and departure and arrival > departure:
        raise PeriodValidationError("Arrival date must be before departure date")

    if no_arrival and no_departure:
        raise PeriodValidationError("Cannot have both 'No arrival' and 'No departure'")

    if no_arrival and departure is not None:
        if any(p.departure_date and p.departure_date < departure for p in existing):
            raise PeriodValidationError("'No arrival' can only be used for the earliest period")

    if no_departure and arrival is not None:
        if any(p.arrival_date and p.arrival_date > arrival for p in existing):
            raise PeriodValidationError("'No departure' can only be used for the latest period")

    period = TravelPeriod(arrival_date=arrival, departure_date=departure)

    if any(period.overlaps(p) for p in existing):
        raise PeriodValidationError(
            "This period overlaps with an existing period. Travel periods cannot overlap."
        )

    return period


def add_period(existing: list[TravelPeriod], period: TravelPeriod) -> list[TravelPeriod]:
    """Return a new newest-first list with the period added."""
    return sort_newest_first([*existing, period])


def validate_day_counts(
    tax_year: int,
    current_year_days: int,
    first_prior_year_days: int,
    second_prior_year_days: int,
) -> DayCounts:
    """
    Check manually entered day counts against each year's length.

    Args:
        tax_year: Year being evaluated
        current_year_days: Days present in the tax year
        first_prior_year_days: Days present in the year before
        second_prior_year_days: Days present two years before

    Returns:
        DayCounts built from the values

    Raises:
        DayCountValidationError: Listing every field that is out of range
    """
    limits = max_days_for_year(tax_year)
    fields = {
        "current_year_days": current_year_days,
        "first_prior_year_days": first_prior_year_days,
        "second_prior_year_days": second_prior_year_days,
    }

    errors = {}
    for (name, value), limit in zip(fields.items(), limits):
        if value is None or not 0 <= value <= limit:
            errors[name] = f"Days must be between 0 and {limit}"

    if errors:
        raise DayCountValidationError(errors)

    return DayCounts(**fields)
