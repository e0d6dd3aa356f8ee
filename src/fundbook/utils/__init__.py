"""Utility functions for fundbook."""

from fundbook.utils.date_parser import parse_date, parse_record_date, parse_timestamp
from fundbook.utils.amount_parser import parse_amount, to_decimal

__all__ = ["parse_date", "parse_record_date", "parse_timestamp", "parse_amount", "to_decimal"]
