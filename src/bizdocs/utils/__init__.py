"""Utility functions for bizdocs."""

from bizdocs.utils.date_parser import parse_date, get_date_range, to_datetime
from bizdocs.utils.amount_parser import parse_amount, parse_percentage
from bizdocs.utils.currency import format_currency, format_number

__all__ = [
    "parse_date",
    "get_date_range",
    "to_datetime",
    "parse_amount",
    "parse_percentage",
    "format_currency",
    "format_number",
]
