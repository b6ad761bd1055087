"""Tests for I-94 travel history parsing."""

from datetime import date

from spt_calc.collectors.i94_parser import (
    ParserState,
    PeriodBuilder,
    find_overlap_warnings,
    is_header_line,
    parse_record_line,
    parse_travel_history,
)
from spt_calc.models.travel import TravelEventType, TravelPeriod


def lines(*rows: tuple[str, str]) -> str:
    """Build export text from (date, type) rows, numbering them."""
    return "\n".join(
        f"{i}\t{when}\t{kind}\tJFK" for i, (when, kind) in enumerate(rows, start=1)
    )


class TestIsHeaderLine:
    """Tests for is_header_line()."""

    def test_row_prefix(self):
        assert is_header_line("Row\tDate\tType\tLocation") is True

    def test_date_keyword_any_case(self):
        assert is_header_line("#\tDATE\tKind") is True

    def test_type_keyword_any_case(self):
        assert is_header_line("#\tWhen\tTYPE") is True

    def test_data_line(self):
        assert is_header_line("1\t2024-01-10\tArrival\tJFK") is False


class TestParseRecordLine:
    """Tests for parse_record_line()."""

    def test_valid_line(self):
        record = parse_record_line("3\t2024-01-10\tArrival\tJFK")
        assert record.event_date == date(2024, 1, 10)
        assert record.event_type == TravelEventType.ARRIVAL
        assert record.location == "JFK"
        assert record.row == "3"

    def test_location_optional(self):
        record = parse_record_line("1\t2024-06-01\tDeparture")
        assert record.event_type == TravelEventType.DEPARTURE
        assert record.location == ""

    def test_surrounding_whitespace(self):
        record = parse_record_line("1\t 2024-06-01 \t Departure \t SFO ")
        assert record.event_date == date(2024, 6, 1)
        assert record.location == "SFO"

    def test_too_few_fields(self):
        assert parse_record_line("1\t2024-06-01") is None

    def test_space_separated(self):
        assert parse_record_line("1 2024-06-01 Departure JFK") is None

    def test_bad_date_format(self):
        assert parse_record_line("1\t2024/06/01\tDeparture\tJFK") is None
        assert parse_record_line("1\t06-01-2024\tDeparture\tJFK") is None
        assert parse_record_line("1\t2024-6-1\tDeparture\tJFK") is None

    def test_impossible_date(self):
        assert parse_record_line("1\t2024-02-30\tArrival\tJFK") is None

    def test_type_is_case_sensitive(self):
        assert parse_record_line("1\t2024-06-01\tarrival\tJFK") is None
        assert parse_record_line("1\t2024-06-01\tDEPARTURE\tJFK") is None

    def test_unknown_type(self):
        assert parse_record_line("1\t2024-06-01\tTransit\tJFK") is None


class TestPeriodBuilder:
    """Tests for the PeriodBuilder state machine."""

    def test_starts_without_pending_arrival(self):
        builder = PeriodBuilder()
        assert builder.state is ParserState.NO_PENDING_ARRIVAL
        assert builder.expected_event == TravelEventType.ARRIVAL

    def test_arrival_opens_pending(self):
        builder = PeriodBuilder()
        builder.on_arrival(date(2024, 1, 1))
        assert builder.state is ParserState.PENDING_ARRIVAL
        assert builder.pending_arrival == date(2024, 1, 1)
        assert builder.expected_event == TravelEventType.DEPARTURE

    def test_departure_closes_pending(self):
        builder = PeriodBuilder()
        builder.on_arrival(date(2024, 1, 1))
        builder.on_departure(date(2024, 2, 1))
        assert builder.state is ParserState.NO_PENDING_ARRIVAL
        assert builder.periods == [
            TravelPeriod(arrival_date=date(2024, 1, 1), departure_date=date(2024, 2, 1))
        ]

    def test_finish_leaves_open_period(self):
        builder = PeriodBuilder()
        builder.on_arrival(date(2024, 1, 1))
        builder.finish()
        assert builder.periods == [TravelPeriod(arrival_date=date(2024, 1, 1))]
        assert builder.state is ParserState.NO_PENDING_ARRIVAL


class TestParseTravelHistory:
    """Tests for parse_travel_history()."""

    def test_simple_pairing(self):
        result = parse_travel_history(lines(("2024-06-01", "Departure"), ("2024-01-10", "Arrival")))
        assert result.periods == [
            TravelPeriod(arrival_date=date(2024, 1, 10), departure_date=date(2024, 6, 1))
        ]
        assert result.warnings == []

    def test_pairing_in_any_file_order(self):
        result = parse_travel_history(lines(("2024-01-10", "Arrival"), ("2024-06-01", "Departure")))
        assert result.periods == [
            TravelPeriod(arrival_date=date(2024, 1, 10), departure_date=date(2024, 6, 1))
        ]
        assert result.warnings == []

    def test_consecutive_arrivals(self):
        result = parse_travel_history(lines(("2024-11-20", "Arrival"), ("2024-09-15", "Arrival")))
        assert TravelPeriod(
            arrival_date=date(2024, 9, 15), departure_date=date(2024, 11, 20)
        ) in result.periods
        assert len(result.warnings) == 1
        assert "2024-09-15" in result.warnings[0]
        assert "2024-11-20" in result.warnings[0]
        assert "two consecutive arrivals" in result.warnings[0]

    def test_trailing_arrival_is_open(self):
        result = parse_travel_history(lines(("2024-05-01", "Arrival")))
        assert result.periods == [TravelPeriod(arrival_date=date(2024, 5, 1))]
        assert result.warnings == []

    def test_leading_departure_is_open_start(self):
        result = parse_travel_history(
            lines(("2024-05-01", "Arrival"), ("2024-03-01", "Departure"))
        )
        assert result.periods == [
            TravelPeriod(arrival_date=date(2024, 5, 1)),
            TravelPeriod(departure_date=date(2024, 3, 1)),
        ]
        assert result.warnings == []

    def test_orphan_departure_warns(self):
        result = parse_travel_history(lines(
            ("2024-03-01", "Departure"),
            ("2024-02-01", "Departure"),
            ("2024-01-01", "Arrival"),
        ))
        assert result.periods == [
            TravelPeriod(arrival_date=date(2024, 1, 1), departure_date=date(2024, 2, 1))
        ]
        assert result.warnings == [
            "Found a departure on 2024-03-01 without a matching arrival. "
            "This may indicate missing data."
        ]

    def test_second_leading_departure_warns(self):
        result = parse_travel_history(lines(
            ("2024-03-01", "Departure"),
            ("2024-02-01", "Departure"),
        ))
        assert result.periods == [TravelPeriod(departure_date=date(2024, 2, 1))]
        assert len(result.warnings) == 1
        assert "2024-03-01" in result.warnings[0]

    def test_malformed_lines_skipped_silently(self):
        text = "\n".join([
            "1\t2024-06-01\tDeparture\tJFK",
            "garbage",
            "2\t2024/03/01\tArrival\tJFK",
            "3\t2024-01-10\tArrival\tJFK",
        ])
        result = parse_travel_history(text)
        assert result.periods == [
            TravelPeriod(arrival_date=date(2024, 1, 10), departure_date=date(2024, 6, 1))
        ]
        assert result.warnings == []

    def test_header_skipped(self):
        text = "Row\tDate\tType\tLocation\n" + lines(
            ("2024-06-01", "Departure"), ("2024-01-10", "Arrival")
        )
        assert len(parse_travel_history(text).periods) == 1

    def test_windows_line_endings(self):
        text = "1\t2024-06-01\tDeparture\tJFK\r\n2\t2024-01-10\tArrival\tJFK\r\n"
        assert len(parse_travel_history(text).periods) == 1

    def test_empty_input(self):
        result = parse_travel_history("")
        assert result.periods == []
        assert result.warnings == []

    def test_nothing_valid(self):
        result = parse_travel_history("This is not I-94 data\nneither is this")
        assert result.periods == []

    def test_same_day_turnaround(self):
        # Left and came back on May 1st
        result = parse_travel_history(lines(
            ("2024-06-01", "Departure"),
            ("2024-05-01", "Arrival"),
            ("2024-05-01", "Departure"),
            ("2024-01-01", "Arrival"),
        ))
        assert result.periods == [
            TravelPeriod(arrival_date=date(2024, 5, 1), departure_date=date(2024, 6, 1)),
            TravelPeriod(arrival_date=date(2024, 1, 1), departure_date=date(2024, 5, 1)),
        ]
        assert result.warnings == []

    def test_same_day_visit(self):
        result = parse_travel_history(lines(
            ("2024-05-01", "Departure"),
            ("2024-05-01", "Arrival"),
        ))
        assert result.periods == [
            TravelPeriod(arrival_date=date(2024, 5, 1), departure_date=date(2024, 5, 1))
        ]
        assert result.warnings == []

    def test_same_day_pair_on_first_date_is_a_visit(self):
        # Read as arrive-then-leave, never as an open start
        result = parse_travel_history(lines(
            ("2024-08-01", "Departure"),
            ("2024-03-01", "Arrival"),
            ("2024-03-01", "Departure"),
        ))
        assert TravelPeriod(departure_date=date(2024, 3, 1)) not in result.periods
        assert TravelPeriod(
            arrival_date=date(2024, 3, 1), departure_date=date(2024, 3, 1)
        ) in result.periods
        assert result.warnings == [
            "Found a departure on 2024-08-01 without a matching arrival. "
            "This may indicate missing data."
        ]

    def test_sorted_newest_first(self):
        result = parse_travel_history(lines(
            ("2021-01-01", "Arrival"),
            ("2021-02-01", "Departure"),
            ("2023-01-01", "Arrival"),
            ("2023-02-01", "Departure"),
        ))
        assert [p.arrival_date for p in result.periods] == [date(2023, 1, 1), date(2021, 1, 1)]

    def test_realistic_history(self, sample_i94_text):
        result = parse_travel_history(sample_i94_text)

        assert result.periods == [
            TravelPeriod(arrival_date=date(2024, 12, 31)),
            TravelPeriod(arrival_date=date(2024, 11, 20), departure_date=date(2024, 12, 30)),
            TravelPeriod(arrival_date=date(2024, 9, 15), departure_date=date(2024, 11, 20)),
            TravelPeriod(arrival_date=date(2024, 1, 10), departure_date=date(2024, 3, 10)),
            TravelPeriod(arrival_date=date(2023, 9, 15), departure_date=date(2023, 12, 20)),
            TravelPeriod(arrival_date=date(2023, 9, 10), departure_date=date(2023, 9, 10)),
            TravelPeriod(arrival_date=date(2022, 8, 31), departure_date=date(2023, 6, 30)),
            TravelPeriod(arrival_date=date(2021, 9, 15), departure_date=date(2022, 8, 20)),
        ]
        assert len(result.warnings) == 1
        assert "2024-09-15 and 2024-11-20" in result.warnings[0]


class TestFindOverlapWarnings:
    """Tests for find_overlap_warnings()."""

    def test_no_overlap(self, make_period):
        periods = [make_period("2024-01-01", "2024-06-30"), make_period("2024-06-30", None)]
        assert find_overlap_warnings(periods) == []

    def test_overlap_described(self, make_period):
        periods = [make_period("2024-01-01", "2024-12-31"), make_period("2024-06-01", "2024-07-31")]
        assert find_overlap_warnings(periods) == [
            "Found overlapping travel periods: 2024-01-01 to 2024-12-31 and "
            "2024-06-01 to 2024-07-31. This may result in incorrect calculations."
        ]

    def test_open_ends_described(self, make_period):
        periods = [make_period("2024-01-01", None), make_period(None, "2024-03-01")]
        warnings = find_overlap_warnings(periods)
        assert len(warnings) == 1
        assert "2024-01-01 to present (no departure)" in warnings[0]
        assert "unknown arrival to 2024-03-01 (no arrival)" in warnings[0]

    def test_every_pair_reported(self, make_period):
        periods = [
            make_period("2024-01-01", "2024-12-31"),
            make_period("2024-02-01", "2024-03-01"),
            make_period("2024-04-01", "2024-05-01"),
        ]
        assert len(find_overlap_warnings(periods)) == 2
