"""
Phone number helpers.

Provider formatting differs between purchase and listing responses, so
numbers are matched on their digits only.
"""

import re

COUNTRY_PREFIX = "+1"

_NON_DIGITS = re.compile(r"\D")


def internationalize(number: str) -> str:
    """Prefix the +1 country code unless it is already there."""
    if number.startswith(COUNTRY_PREFIX):
        return number
    return f"{COUNTRY_PREFIX}{number}"


def strip_internationalize(number: str) -> str:
    """Remove a leading +1 country code, if present."""
    if number.startswith(COUNTRY_PREFIX):
        return number[len(COUNTRY_PREFIX):]
    return number


def normalize_digits(number: str) -> str:
    return _NON_DIGITS.sub("", number)


def same_number(a: str, b: str) -> bool:
    """True when both numbers carry the same digits, ignoring formatting."""
    return normalize_digits(a) == normalize_digits(b)
