"""Reconstruct travel periods from I-94 travel history exports.

The I-94 website lists entries as tab-separated rows:

    Row    Date (YYYY-MM-DD)    Type (Arrival|Departure)    Location

Rows come newest first. Malformed rows are skipped silently; inconsistencies
in the history (two arrivals in a row, a departure with no arrival,
overlapping periods) are reported as warnings and never abort parsing.
"""

import logging
import re
from datetime import date
from enum import Enum
from itertools import groupby

from spt_calc.models.results import ParseResult
from spt_calc.models.travel import (
    TravelEventType,
    TravelPeriod,
    TravelRecord,
    sort_newest_first,
)

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
MIN_FIELDS = 3


class ParserState(Enum):
    """Whether an arrival is waiting for its departure."""

    NO_PENDING_ARRIVAL = "no_pending_arrival"
    PENDING_ARRIVAL = "pending_arrival"


def is_header_line(line: str) -> bool:
    """Check whether a line looks like the export's column header."""
    lowered = line.lower()
    return line.startswith("Row") or "date" in lowered or "type" in lowered


def parse_record_line(line: str) -> TravelRecord | None:
    """
    Parse one export line into a travel record.

    Args:
        line: A single line of the export

    Returns:
        TravelRecord, or None if the line is a header or malformed
    """
    if is_header_line(line):
        return None

    parts = line.split("\t")
    if len(parts) < MIN_FIELDS:
        return None

    raw_date = parts[1].strip()
    raw_type = parts[2].strip()
    location = parts[3].strip() if len(parts) > MIN_FIELDS else ""

    if not DATE_PATTERN.fullmatch(raw_date):
        return None

    try:
        event_date = date.fromisoformat(raw_date)
    except ValueError:
        # Matches the pattern but is not a real day (e.g. 2024-02-30)
        return None

    # Type literals are case-sensitive
    if raw_type not in (TravelEventType.ARRIVAL.value, TravelEventType.DEPARTURE.value):
        return None

    return TravelRecord(
        event_date=event_date,
        event_type=TravelEventType(raw_type),
        location=location,
        row=parts[0].strip(),
    )


class PeriodBuilder:
    """
    Pairs arrivals with departures in chronological order.

    States:
        NO_PENDING_ARRIVAL: the person is (as far as we know) abroad
        PENDING_ARRIVAL: an arrival is open and waiting for a departure

    The first event of a history may be a departure, meaning the person
    was already present before the records begin.
    """

    def __init__(self) -> None:
        self.state = ParserState.NO_PENDING_ARRIVAL
        self.pending_arrival: date | None = None
        self.periods: list[TravelPeriod] = []
        self.warnings: list[str] = []
        self.events_seen = 0

    @property
    def expected_event(self) -> TravelEventType:
        """The event that would be consistent with the current state."""
        if self.state is ParserState.PENDING_ARRIVAL:
            return TravelEventType.DEPARTURE
        return TravelEventType.ARRIVAL

    def feed(self, record: TravelRecord) -> None:
        if record.event_type == TravelEventType.ARRIVAL:
            self.on_arrival(record.event_date)
        else:
            self.on_departure(record.event_date)
        self.events_seen += 1

    def on_arrival(self, arrival: date) -> None:
        if self.state is ParserState.PENDING_ARRIVAL:
            self.warnings.append(
                "Found two consecutive arrivals without a departure in between: "
                f"{self.pending_arrival.isoformat()} and {arrival.isoformat()}. "
                "The first arrival has been treated as if you departed on the same "
                "day as the second arrival."
            )
            self.periods.append(
                TravelPeriod(arrival_date=self.pending_arrival, departure_date=arrival)
            )

        self.pending_arrival = arrival
        self.state = ParserState.PENDING_ARRIVAL

    def on_departure(self, departure: date) -> None:
        if self.state is ParserState.PENDING_ARRIVAL:
            self.periods.append(
                TravelPeriod(arrival_date=self.pending_arrival, departure_date=departure)
            )
            self.pending_arrival = None
            self.state = ParserState.NO_PENDING_ARRIVAL
            return

        if self.events_seen == 0:
            self.periods.append(TravelPeriod(arrival_date=None, departure_date=departure))
            return

        self.warnings.append(
            f"Found a departure on {departure.isoformat()} without a matching arrival. "
            "This may indicate missing data."
        )

    def finish(self) -> None:
        """Close a trailing arrival as still present."""
        if self.state is ParserState.PENDING_ARRIVAL:
            self.periods.append(
                TravelPeriod(arrival_date=self.pending_arrival, departure_date=None)
            )
            self.pending_arrival = None
            self.state = ParserState.NO_PENDING_ARRIVAL


def find_overlap_warnings(periods: list[TravelPeriod]) -> list[str]:
    """
    Describe every overlapping pair of periods.

    Args:
        periods: Reconstructed periods

    Returns:
        One warning per overlapping pair
    """
    warnings = []
    for i, first in enumerate(periods):
        for second in periods[i + 1:]:
            if first.overlaps(second):
                warnings.append(
                    f"Found overlapping travel periods: {first.describe()} and "
                    f"{second.describe()}. This may result in incorrect calculations."
                )
    return warnings


def parse_travel_history(raw_text: str) -> ParseResult:
    """
    Parse an I-94 travel history export into travel periods.

    Records are processed oldest first. When several records share a
    date, the one consistent with the current state goes first: a
    departure while an arrival is open, an arrival otherwise.

    Args:
        raw_text: The export, one record per line

    Returns:
        ParseResult with periods sorted newest first and any warnings.
        An empty period list means no usable record was found.
    """
    lines = raw_text.strip().splitlines()
    records = [record for record in map(parse_record_line, lines) if record is not None]
    records.sort(key=lambda r: r.event_date)

    builder = PeriodBuilder()
    for _, same_day in groupby(records, key=lambda r: r.event_date):
        pending = list(same_day)
        while pending:
            record = next(
                (r for r in pending if r.event_type == builder.expected_event),
                pending[0],
            )
            pending.remove(record)
            builder.feed(record)
    builder.finish()

    warnings = builder.warnings + find_overlap_warnings(builder.periods)

    logger.debug(
        f"Parsed {len(lines)} line(s): {len(records)} record(s), "
        f"{len(builder.periods)} period(s), {len(warnings)} warning(s)"
    )

    return ParseResult(periods=sort_newest_first(builder.periods), warnings=warnings)
