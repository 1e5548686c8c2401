"""
Parsing of contract terms, date arithmetic and rounding helpers.
"""
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from .text import normalize_text

TermValue = Union[str, int, float, None]

DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365


def _plain_number(text: str) -> int | None:
    match = re.fullmatch(r"(\d+)", text.strip())
    return int(match.group(1)) if match else None


def parse_execution_days(term: TermValue) -> int | None:
    """
    Convert an execution term to days.

    Numbers are taken as days. Text is read as "<n> dias", "<n> meses" or
    "<n> anos" (checked in that order). Anything else is absent.

    Examples:
        >>> parse_execution_days("90 dias corridos")
        90
        >>> parse_execution_days("6 meses")
        180
        >>> parse_execution_days("1 ano")
        365
        >>> parse_execution_days("conforme cronograma") is None
        True
    """
    if term is None or isinstance(term, bool):
        return None
    if isinstance(term, (int, float)):
        return int(term) if term > 0 else None

    text = normalize_text(term)
    if not text:
        return None

    if "dia" in text:
        match = re.search(r"(\d+)\s*dias?", text)
        return int(match.group(1)) if match else None
    if "mes" in text:
        match = re.search(r"(\d+)\s*mes", text)
        return int(match.group(1)) * DAYS_PER_MONTH if match else None
    if "ano" in text:
        match = re.search(r"(\d+)\s*anos?", text)
        return int(match.group(1)) * DAYS_PER_YEAR if match else None

    return _plain_number(text)


def parse_validity_months(term: TermValue) -> int | None:
    """
    Convert a contract validity term to months.

    Examples:
        >>> parse_validity_months("12 meses")
        12
        >>> parse_validity_months("2 anos")
        24
        >>> parse_validity_months(6)
        6
    """
    if term is None or isinstance(term, bool):
        return None
    if isinstance(term, (int, float)):
        return int(term) if term > 0 else None

    text = normalize_text(term)
    if not text:
        return None

    if "mes" in text:
        match = re.search(r"(\d+)\s*mes", text)
        return int(match.group(1)) if match else None
    if "ano" in text:
        match = re.search(r"(\d+)\s*anos?", text)
        return int(match.group(1)) * 12 if match else None

    return _plain_number(text)


def as_date(value: Union[date, datetime, None]) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: Union[date, datetime, None], end: Union[date, datetime, None]) -> int | None:
    """Whole days from start to end, or None if either side is absent."""
    start, end = as_date(start), as_date(end)
    if start is None or end is None:
        return None
    return (end - start).days


def round_half_up(value: float, ndigits: int = 0) -> Union[int, float]:
    """
    Round half away from zero for positive values, the way business figures
    are usually rounded (Python's round() rounds half to even).

    Returns an int when ndigits is 0.

    Examples:
        >>> round_half_up(72.5)
        73
        >>> round_half_up(12.345, 2)
        12.35
    """
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if ndigits == 0:
        return int(rounded)
    return float(rounded)


def clamp(value: float, lower: int = 0, upper: int = 100) -> int:
    """Clamp a score into [lower, upper] and return it as int."""
    return int(max(lower, min(upper, value)))
