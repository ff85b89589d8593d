"""Utility functions for tillbook."""

from tillbook.utils.date_parser import parse_date
from tillbook.utils.amount_parser import format_amount, parse_amount
from tillbook.utils.account_resolver import resolve_account

__all__ = ["parse_date", "parse_amount", "format_amount", "resolve_account"]
