"""
Shared helpers for text normalisation, term parsing and rounding.
"""
from .terms import (
    as_date,
    clamp,
    days_between,
    parse_execution_days,
    parse_validity_months,
    round_half_up,
)
from .text import clean_amount, contains_any, find_keywords, normalize_code, normalize_text

__all__ = [
    "as_date",
    "clamp",
    "clean_amount",
    "contains_any",
    "days_between",
    "find_keywords",
    "normalize_code",
    "normalize_text",
    "parse_execution_days",
    "parse_validity_months",
    "round_half_up",
]
