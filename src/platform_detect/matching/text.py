"""Small string and number helpers shared by the matchers and corrections.

The user-agent grammar is loose enough that version tokens are compared
numerically after being read leniently: ``parse_float('537.36+')`` is
``537.36`` and an unreadable token is ``nan`` (every comparison with it is
false, so a rule guarded by it simply does not fire).
"""
import math
import re
from typing import Optional

_LEADING_FLOAT = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')
_LEADING_INT = re.compile(r'\s*([+-]?\d+)')
_FULL_NUMBER = re.compile(r'\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*')

_UNCAPITALISED = re.compile(r'^(?:webOS|i(?:OS|P))')


def qualify(value: str) -> str:
    """Make every inner space or hyphen optional (``Kindle Fire`` -> ``Kindle ?Fire``)."""
    return re.sub(r'([ -])(?!$)', r'\1?', value)


def trim(value: str) -> str:
    return re.sub(r'^ +| +$', '', value)


def capitalize(value: str) -> str:
    if not value:
        return value
    return value[0].upper() + value[1:]


def format_token(value: Optional[str]) -> Optional[str]:
    """Trim a matched token and capitalise it unless it is webOS, iOS or an iDevice."""
    if value is None:
        return None
    value = trim(value)
    if _UNCAPITALISED.match(value):
        return value
    return capitalize(value)


def parse_float(value) -> float:
    if value is None:
        return math.nan
    match = _LEADING_FLOAT.match(str(value))
    return float(match.group(1)) if match else math.nan


def parse_int(value) -> float:
    if value is None:
        return math.nan
    match = _LEADING_INT.match(str(value))
    return float(int(match.group(1))) if match else math.nan


def to_number(value) -> float:
    """Strict numeric reading of a whole token; ``None`` and ``''`` read as zero."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value)
    if not text.strip():
        return 0.0
    if _FULL_NUMBER.fullmatch(text):
        return float(text.strip())
    return math.nan


def display(value) -> str:
    """Render an optional token inside a note, keeping absent values visible."""
    return 'null' if value is None else str(value)
