"""Collectors that turn raw travel records into travel periods."""

from spt_calc.collectors.i94_parser import parse_record_line, parse_travel_history

__all__ = ["parse_record_line", "parse_travel_history"]
