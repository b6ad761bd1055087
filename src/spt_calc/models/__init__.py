"""Data models for travel periods, day counts, and test results."""

from spt_calc.models.results import (
    CalculationEmpty,
    CalculationOutcome,
    CalculationSuccess,
    DayCounts,
    ImportFailure,
    ImportOutcome,
    ImportSuccess,
    ParseResult,
    SPTResult,
)
from spt_calc.models.travel import (
    TravelEventType,
    TravelPeriod,
    TravelRecord,
    YearWindow,
    days_in_year,
    is_leap_year,
    sort_newest_first,
    tax_year_windows,
)

__all__ = [
    "CalculationEmpty",
    "CalculationOutcome",
    "CalculationSuccess",
    "DayCounts",
    "ImportFailure",
    "ImportOutcome",
    "ImportSuccess",
    "ParseResult",
    "SPTResult",
    "TravelEventType",
    "TravelPeriod",
    "TravelRecord",
    "YearWindow",
    "days_in_year",
    "is_leap_year",
    "sort_newest_first",
    "tax_year_windows",
]
