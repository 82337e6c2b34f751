"""Cell value normalization.

Converts a raw cell value to a canonical typed form based on the semantic
role its column name suggests: ISO dates for date-like columns, floats for
monetary columns, integers for count-like columns, trimmed text otherwise.
Every function here is pure and deterministic.
"""

import math
import re
from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser

from tabular_consolidator.matching.similarity import split_words

# =============================================================================
# COLUMN ROLE KEYWORDS
# =============================================================================
# Matched as case-insensitive substrings of the raw column name, in this order.

DATE_KEYWORDS: tuple[str, ...] = ("date", "time", "created", "updated")
AMOUNT_KEYWORDS: tuple[str, ...] = (
    "amount",
    "price",
    "cost",
    "total",
    "revenue",
    "salary",
    "balance",
)
# Matched against whole words of the column name.
AMOUNT_WORDS: tuple[str, ...] = ("fee",)
INTEGER_KEYWORDS: tuple[str, ...] = ("quantity", "qty", "count")

_CURRENCY_CHARS_RE = re.compile(r"[\s,$€£¥₹]")
_FLOAT_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_INTEGER_RE = re.compile(r"[-+]?\d+")

# Two distinct defaults: a component dateutil filled in from the default
# differs between the two parses.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def is_null(value: Any) -> bool:
    """Check whether a raw cell value counts as empty.

    Args:
        value: Raw cell value.

    Returns:
        True for None, blank strings and NaN floats.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    return False


def is_number(value: Any) -> bool:
    """Check whether a value is a real (non-bool, non-NaN) number."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def parse_date(value: Any) -> date | None:
    """Parse a value as a calendar date.

    Strings must carry a full calendar date; a bare time or a lone day number
    does not count, so the result never depends on today's date.

    Args:
        value: A date, datetime or string.

    Returns:
        The calendar date, or None if the value is not a complete date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        first = date_parser.parse(text, default=_DEFAULT_A)
        second = date_parser.parse(text, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None

    if first.date() != second.date():
        return None
    return first.date()


def parse_amount(value: Any) -> float | None:
    """Parse a monetary value, ignoring currency symbols, commas and spaces.

    Args:
        value: A number or string such as ``"$1,200.50"``.

    Returns:
        The amount as a float, or None if it does not parse.
    """
    if is_number(value):
        return float(value)
    if not isinstance(value, str):
        return None

    cleaned = _CURRENCY_CHARS_RE.sub("", value)
    if not _FLOAT_RE.fullmatch(cleaned):
        return None
    return float(cleaned)


def parse_integer(value: Any) -> int | None:
    """Parse a count-like value as an integer.

    Args:
        value: A number or string such as ``"1,024"``.

    Returns:
        The integer, or None if the value is not a whole number.
    """
    if is_number(value):
        if isinstance(value, float) and not value.is_integer():
            return None
        return int(value)
    if not isinstance(value, str):
        return None

    cleaned = value.strip().replace(",", "")
    if not _INTEGER_RE.fullmatch(cleaned):
        return None
    return int(cleaned)


def normalize_value(value: Any, raw_column_name: str) -> Any:
    """Normalize a raw cell value according to its column's role.

    Args:
        value: Raw cell value.
        raw_column_name: The raw (source) column name the value came from.

    Returns:
        None for empty values; an ISO ``YYYY-MM-DD`` string for date columns;
        a float for monetary columns; an int for count columns; trimmed text
        for other strings; anything else unchanged. Values that fail their
        column's parse are returned as they came (date strings trimmed).
    """
    if is_null(value):
        return None

    column = raw_column_name.lower()

    if any(keyword in column for keyword in DATE_KEYWORDS):
        parsed = parse_date(value)
        if parsed is not None:
            return parsed.isoformat()
        return value.strip() if isinstance(value, str) else value

    words = {word.lower() for word in split_words(raw_column_name)}

    is_amount = any(keyword in column for keyword in AMOUNT_KEYWORDS)
    if is_amount or words.intersection(AMOUNT_WORDS):
        amount = parse_amount(value)
        return value if amount is None else amount

    if any(keyword in column for keyword in INTEGER_KEYWORDS):
        integer = parse_integer(value)
        return value if integer is None else integer

    if isinstance(value, str):
        return value.strip()

    return value

