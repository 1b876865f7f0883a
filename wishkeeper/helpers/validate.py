"""Input validation shared by the API handlers and the front-end form helpers.

Each ``parse_*`` function is total: it never raises, and returns a
``Validation`` carrying either the parsed value or the reason it was rejected.
The ``is_*`` predicates are thin boolean wrappers for callers that only need a
yes/no answer.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from urllib.parse import urlparse

# Characters that have no business in a name and would otherwise end up in SQL/HTML
_FORBIDDEN_CHARS = re.compile(r'[\'";<>]')

# Plain ASCII decimal notation, optionally signed and with an exponent
_NUMBER = re.compile(r'[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?', re.ASCII)

# DECIMAL(10, 2) holds up to 99999999.99
MAX_PRICE = Decimal('100000000')
_CENTS = Decimal('0.01')


@dataclass(frozen=True)
class Validation:
    ok: bool
    value: Any = None
    reason: str = ''

    def __bool__(self):
        return self.ok


def _valid(value) -> Validation:
    return Validation(True, value)


def _invalid(reason: str) -> Validation:
    return Validation(False, None, reason)


def parse_number(value) -> Validation:
    """Accept real numbers and non-empty strings that parse as one."""
    if isinstance(value, bool):
        return _invalid('must be a number')
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return _invalid('must be a finite number')
        return _valid(value)
    if not isinstance(value, str):
        return _invalid('must be a number')

    text = value.strip()
    if not text:
        return _invalid('must not be empty')
    if not _NUMBER.fullmatch(text):
        return _invalid('must be a number')
    try:
        return _valid(int(text))
    except ValueError:
        pass
    number = float(text)
    if not math.isfinite(number):
        return _invalid('must be a finite number')
    return _valid(number)


def parse_id(value) -> Validation:
    """Identifiers are non-negative whole numbers, given as int or ASCII digit string."""
    result = parse_number(value)
    if not result:
        return result
    if not isinstance(result.value, int):
        return _invalid('must be a whole number')
    if result.value < 0:
        return _invalid('must not be negative')
    if isinstance(value, str) and not (value.isascii() and value.isdigit()):
        return _invalid('must contain only digits')
    return result


def parse_price(value) -> Validation:
    """Non-negative amount that fits DECIMAL(10, 2), rounded to whole cents."""
    result = parse_number(value)
    if not result:
        return result
    if result.value < 0:
        return _invalid('must not be negative')
    if result.value >= MAX_PRICE:
        return _invalid(f'must be less than {MAX_PRICE}')

    price = Decimal(str(result.value)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    if price >= MAX_PRICE:
        return _invalid(f'must be less than {MAX_PRICE}')
    return _valid(price)


def parse_name(value, max_length: int | None = None) -> Validation:
    if not isinstance(value, str):
        return _invalid('must be a string')
    if not value.strip():
        return _invalid('must not be empty')
    if max_length is not None and len(value) > max_length:
        return _invalid(f'must be at most {max_length} characters')
    if _FORBIDDEN_CHARS.search(value):
        return _invalid('must not contain \' " ; < or >')
    return _valid(value)


def parse_date(value) -> Validation:
    """Accept an ISO-8601 calendar date (a datetime is cut down to its date)."""
    safe = parse_name(value)
    if not safe:
        return safe

    text = value.strip()
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(text).date()
        except ValueError:
            return _invalid('must be a valid date (YYYY-MM-DD)')
    return _valid(parsed.isoformat())


def parse_link(value) -> Validation:
    if not isinstance(value, str) or not value.strip():
        return _invalid('must be a URL')
    text = value.strip()
    if any(ch.isspace() for ch in text):
        return _invalid('must not contain whitespace')

    parts = urlparse(text)
    if parts.scheme not in ('http', 'https') or not parts.netloc:
        return _invalid('must be an absolute http(s) URL')
    return _valid(text)


def is_number(value) -> bool:
    return parse_number(value).ok


def is_price(value) -> bool:
    return parse_price(value).ok


def is_name(value) -> bool:
    return parse_name(value).ok


def is_date(value) -> bool:
    return parse_date(value).ok


def is_link(value) -> bool:
    return parse_link(value).ok
