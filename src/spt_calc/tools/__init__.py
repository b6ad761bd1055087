"""Day counting and presence test calculations."""

from spt_calc.tools.day_counter import count_window_days, reconcile, resolve_period
from spt_calc.tools.spt_calculations import (
    CURRENT_YEAR_MINIMUM_DAYS,
    TOTAL_DAYS_THRESHOLD,
    evaluate,
    max_days_for_year,
)

__all__ = [
    "CURRENT_YEAR_MINIMUM_DAYS",
    "TOTAL_DAYS_THRESHOLD",
    "count_window_days",
    "evaluate",
    "max_days_for_year",
    "reconcile",
    "resolve_period",
]
