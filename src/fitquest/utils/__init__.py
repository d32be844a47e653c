"""Shared helpers for numbers and calendar handling."""

from .numbers import coerce_number, round_half_up
from .timeutils import (
    align_to_reference,
    calendar_day,
    days_between,
    parse_timestamp,
    week_start_date,
)

__all__ = [
    "coerce_number",
    "round_half_up",
    "align_to_reference",
    "calendar_day",
    "days_between",
    "parse_timestamp",
    "week_start_date",
]
