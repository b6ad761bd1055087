"""Substantial Presence Test weighting (IRC 7701(b)(3)).

A person meets the test for a tax year when they were present at least
31 days during that year and at least 183 days over the three-year
period, counting all days of the current year, 1/3 of the days of the
first prior year, and 1/6 of the days of the second prior year.
"""

from spt_calc.models.results import DayCounts, SPTResult
from spt_calc.models.travel import TravelPeriod, tax_year_windows

# Statutory thresholds
CURRENT_YEAR_MINIMUM_DAYS = 31
TOTAL_DAYS_THRESHOLD = 183

# Weighting divisors for prior years
FIRST_PRIOR_YEAR_DIVISOR = 3
SECOND_PRIOR_YEAR_DIVISOR = 6


def max_days_for_year(tax_year: int) -> tuple[int, int, int]:
    """
    Get the maximum day count for each window of a tax year.

    Args:
        tax_year: Year being evaluated

    Returns:
        (current, first prior, second prior) window lengths
    """
    current, first_prior, second_prior = tax_year_windows(tax_year)
    return current.length, first_prior.length, second_prior.length


def evaluate(
    counts: DayCounts,
    tax_year: int | None = None,
    periods: list[TravelPeriod] | None = None,
) -> SPTResult:
    """
    Apply the weighting formula and thresholds to three day counts.

    No rounding is applied before the 183-day comparison.

    Args:
        counts: Days present in the current and two prior years
        tax_year: Year being evaluated (carried through for display)
        periods: Periods the counts came from, if any

    Returns:
        SPTResult with the weighted breakdown and verdict
    """
    current_year_days = counts.current_year_days
    first_prior_calculated = counts.first_prior_year_days / FIRST_PRIOR_YEAR_DIVISOR
    second_prior_calculated = counts.second_prior_year_days / SECOND_PRIOR_YEAR_DIVISOR

    total_days = current_year_days + first_prior_calculated + second_prior_calculated

    meets_current = current_year_days >= CURRENT_YEAR_MINIMUM_DAYS
    meets_total = total_days >= TOTAL_DAYS_THRESHOLD

    return SPTResult(
        tax_year=tax_year,
        current_year_days=current_year_days,
        first_prior_year_days=counts.first_prior_year_days,
        second_prior_year_days=counts.second_prior_year_days,
        first_prior_year_days_calculated=first_prior_calculated,
        second_prior_year_days_calculated=second_prior_calculated,
        total_days=total_days,
        meets_current_year_requirement=meets_current,
        meets_total_days_requirement=meets_total,
        passes_test=meets_current and meets_total,
        periods=list(periods or []),
    )
