"""Entry points tying parsing, day counting, and evaluation together."""

import logging
from datetime import date

from spt_calc.collectors.i94_parser import parse_travel_history
from spt_calc.models.results import (
    CalculationEmpty,
    CalculationSuccess,
    DayCounts,
    ImportFailure,
    ImportSuccess,
)
from spt_calc.models.travel import TravelPeriod, sort_newest_first
from spt_calc.tools.day_counter import reconcile
from spt_calc.tools.spt_calculations import evaluate

logger = logging.getLogger(__name__)

NO_PERIODS_MESSAGE = "At least one travel period is required"
NO_VALID_PERIODS_MESSAGE = (
    "No valid travel periods found in the data. Please check the format and try again."
)
PARSE_FAILED_MESSAGE = "Error parsing I-94 data. Please check the format and try again."


def calculate_from_day_counts(tax_year: int, counts: DayCounts) -> CalculationSuccess:
    """Evaluate manually entered day counts."""
    return CalculationSuccess(result=evaluate(counts, tax_year=tax_year))


def calculate_from_periods(
    tax_year: int,
    periods: list[TravelPeriod],
    today: date | None = None,
) -> CalculationSuccess | CalculationEmpty:
    """
    Count days from travel periods and evaluate them.

    Args:
        tax_year: Year being evaluated
        periods: Validated travel periods
        today: Date open-ended periods run through

    Returns:
        CalculationSuccess carrying the periods used, or CalculationEmpty
        when there is nothing to count
    """
    if not periods:
        return CalculationEmpty(message=NO_PERIODS_MESSAGE)

    counts = reconcile(periods, tax_year, today=today)
    result = evaluate(counts, tax_year=tax_year, periods=sort_newest_first(periods))

    logger.info(
        f"Tax year {tax_year}: {result.total_days_display} weighted days, "
        f"{'passes' if result.passes_test else 'does not pass'}"
    )
    return CalculationSuccess(result=result)


def import_travel_history(raw_text: str) -> ImportSuccess | ImportFailure:
    """
    Turn an I-94 travel history export into travel periods.

    Args:
        raw_text: Tab-separated export text

    Returns:
        ImportSuccess (check requires_confirmation before accepting) or
        ImportFailure with a message for the user
    """
    try:
        parsed = parse_travel_history(raw_text)
    except Exception as e:
        logger.warning(f"Travel history parsing failed: {e}")
        return ImportFailure(message=PARSE_FAILED_MESSAGE)

    if not parsed.periods:
        return ImportFailure(message=NO_VALID_PERIODS_MESSAGE)

    if parsed.has_warnings:
        logger.info(f"Travel history imported with {len(parsed.warnings)} warning(s)")
        for warning in parsed.warnings:
            logger.debug(f"Import warning: {warning}")

    return ImportSuccess(periods=parsed.periods, warnings=parsed.warnings)
