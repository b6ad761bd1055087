"""Day counting across the three tax-year windows.

Travel periods are clipped to each year window and walked day by day. A
single accumulator of already-counted calendar days is threaded through
every clipping step so a day covered by two periods (for example a
departure and an arrival on the same date) is counted once.

Dates are plain calendar dates, so no time-of-day or time zone can shift a
boundary by one day.
"""

import logging
from datetime import date, timedelta

from spt_calc.config import get_config
from spt_calc.models.results import DayCounts
from spt_calc.models.travel import TravelPeriod, YearWindow, tax_year_windows

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)

CountedDays = frozenset[date]


def resolve_period(
    period: TravelPeriod,
    tax_year: int,
    today: date,
) -> tuple[date, date] | None:
    """
    Resolve open endpoints of a period to concrete dates.

    Args:
        period: Travel period, possibly open at one end
        tax_year: Year being evaluated
        today: Date an open departure runs through

    Returns:
        (start, end) dates, or None if the period has no endpoints
    """
    if period.is_empty:
        return None

    current, _, second_prior = tax_year_windows(tax_year)

    # Already present before the earliest window any count looks at
    start = period.arrival_date or second_prior.start
    # Still present: through today, but never past the current window
    end = period.departure_date or min(today, current.end)

    return start, end


def count_window_days(
    start: date,
    end: date,
    window: YearWindow,
    counted: CountedDays,
) -> tuple[int, CountedDays]:
    """
    Count days of [start, end] inside a year window that were not yet counted.

    Args:
        start: First day present
        end: Last day present
        window: Year window to clip to
        counted: Days already counted in this reconciliation

    Returns:
        (newly counted days, updated accumulator)
    """
    if end < window.start or start > window.end:
        return 0, counted

    clipped_start = max(start, window.start)
    clipped_end = min(end, window.end)

    new_days: set[date] = set()
    day = clipped_start
    while day <= clipped_end:
        if day not in counted:
            new_days.add(day)
        day += ONE_DAY

    return len(new_days), counted | new_days


def reconcile(
    periods: list[TravelPeriod],
    tax_year: int,
    today: date | None = None,
) -> DayCounts:
    """
    Count distinct days present in the current and two prior years.

    Args:
        periods: Travel periods in any order
        tax_year: Year being evaluated
        today: Date an open departure runs through (defaults to the
            configured reference date, else the system date)

    Returns:
        DayCounts for the current, first prior, and second prior years
    """
    if today is None:
        today = get_config().today()

    windows = tax_year_windows(tax_year)
    totals = [0, 0, 0]
    counted: CountedDays = frozenset()

    for period in periods:
        resolved = resolve_period(period, tax_year, today)
        if resolved is None:
            continue

        start, end = resolved
        for index, window in enumerate(windows):
            days, counted = count_window_days(start, end, window, counted)
            totals[index] += days

    logger.debug(
        f"Reconciled {len(periods)} period(s) for {tax_year}: "
        f"{totals[0]} / {totals[1]} / {totals[2]} days"
    )

    return DayCounts(
        current_year_days=totals[0],
        first_prior_year_days=totals[1],
        second_prior_year_days=totals[2],
    )
