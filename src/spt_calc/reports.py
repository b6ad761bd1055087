"""Substantial Presence Test report generation."""

from spt_calc.models.results import SPTResult
from spt_calc.tools.spt_calculations import (
    CURRENT_YEAR_MINIMUM_DAYS,
    FIRST_PRIOR_YEAR_DIVISOR,
    SECOND_PRIOR_YEAR_DIVISOR,
    TOTAL_DAYS_THRESHOLD,
)

DISCLAIMER = (
    "This calculator is for informational purposes only and does not constitute "
    "tax advice. Consult with a tax professional for your specific situation."
)


def _days(value: float) -> str:
    """Format a weighted day count."""
    return f"{value:.2f} days"


def _mark(passed: bool) -> str:
    return "Yes" if passed else "No"


def verdict_headline(result: SPTResult) -> str:
    """One-line verdict."""
    if result.passes_test:
        return "You meet the Substantial Presence Test"
    return "You do not meet the Substantial Presence Test"


def verdict_detail(result: SPTResult) -> str:
    """Residency sentence for the tax year."""
    year = result.tax_year if result.tax_year is not None else "the tax year"
    if result.passes_test:
        return f"Based on your input, you are considered a U.S. resident for tax purposes for {year}."
    return f"Based on your input, you are not considered a U.S. resident for tax purposes for {year}."


def breakdown_rows(result: SPTResult) -> list[tuple[str, str]]:
    """
    Label/value rows of the weighted calculation.

    Args:
        result: Evaluated test result

    Returns:
        List of (label, value) pairs, total last
    """
    year = result.tax_year
    current_label = f"Current Year ({year})" if year else "Current Year"
    first_label = f"First Prior Year ({year - 1})" if year else "First Prior Year"
    second_label = f"Second Prior Year ({year - 2})" if year else "Second Prior Year"

    return [
        (current_label, f"{result.current_year_days} days"),
        (
            first_label,
            f"{result.first_prior_year_days} days × 1/{FIRST_PRIOR_YEAR_DIVISOR} = "
            f"{_days(result.first_prior_year_days_calculated)}",
        ),
        (
            second_label,
            f"{result.second_prior_year_days} days × 1/{SECOND_PRIOR_YEAR_DIVISOR} = "
            f"{_days(result.second_prior_year_days_calculated)}",
        ),
        ("Total Days", _days(result.total_days)),
    ]


def requirement_rows(result: SPTResult) -> list[tuple[str, bool]]:
    """The two requirements and whether each is met."""
    return [
        (
            f"At least {CURRENT_YEAR_MINIMUM_DAYS} days in the current year",
            result.meets_current_year_requirement,
        ),
        (
            f"At least {TOTAL_DAYS_THRESHOLD} total calculated days",
            result.meets_total_days_requirement,
        ),
    ]


def period_rows(result: SPTResult) -> list[tuple[str, str, str]]:
    """Arrival, departure, and inclusive day span of each period used."""
    rows = []
    for period in result.periods:
        span = period.span_days()
        rows.append((
            period.arrival_date.isoformat() if period.arrival_date else "N/A",
            period.departure_date.isoformat() if period.departure_date else "N/A",
            str(span) if span is not None else "N/A",
        ))
    return rows


def generate_spt_report(result: SPTResult) -> str:
    """
    Generate a Markdown report of a test result.

    Args:
        result: Evaluated test result

    Returns:
        Complete Markdown report
    """
    lines: list[str] = []

    title = "Substantial Presence Test"
    if result.tax_year is not None:
        title += f" - {result.tax_year}"
    lines.append(f"# {title}")
    lines.append("")
    lines.append(f"**{verdict_headline(result)}**")
    lines.append("")
    lines.append(verdict_detail(result))
    lines.append("")

    lines.append("## Calculation Breakdown")
    lines.append("")
    for label, value in breakdown_rows(result):
        lines.append(f"- **{label}:** {value}")
    lines.append("")

    lines.append("## Requirements to meet the test")
    lines.append("")
    for label, passed in requirement_rows(result):
        lines.append(f"- {label}: {_mark(passed)}")
    lines.append("")

    if result.from_date_ranges:
        lines.append("## Travel Periods Used")
        lines.append("")
        lines.append("| Arrival | Departure | Days |")
        lines.append("|---------|-----------|------|")
        for arrival, departure, days in period_rows(result):
            lines.append(f"| {arrival} | {departure} | {days} |")
        lines.append("")

    lines.append("---")
    lines.append("")
    lines.append(f"*{DISCLAIMER}*")

    return "\n".join(lines)
