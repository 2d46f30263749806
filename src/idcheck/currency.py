"""
Locale-formatted numbers and simple monetary predicates.

``convert_locale_number`` turns what a person typed ("R$ 1.234,56", "$1,234.56")
into a float. The predicates work on plain numbers and are meant to be chained
after a conversion.
"""

from __future__ import annotations

import re
from typing import Dict, Tuple

from .exceptions import LocaleNumberError
from .models import Jurisdiction

# jurisdiction -> (thousands separator, decimal separator)
SEPARATORS: Dict[Jurisdiction, Tuple[str, str]] = {
    Jurisdiction.BR: (".", ","),
    Jurisdiction.CA: (",", "."),
    Jurisdiction.US: (",", "."),
}

_SYMBOL = re.compile(r"^(?:R\$|\$)\s*")
# integer part either ungrouped or grouped in threes, then an optional fraction
_GROUPED: Dict[Jurisdiction, re.Pattern] = {
    j: re.compile(rf"[+-]?(?:\d{{1,3}}(?:{re.escape(t)}\d{{3}})+|\d+)(?:{re.escape(d)}\d+)?")
    for j, (t, d) in SEPARATORS.items()
}
_TWO_DECIMALS = re.compile(r"\d+(?:\.\d{1,2})?")


def convert_locale_number(value: str, jurisdiction: Jurisdiction | str = "BR") -> float:
    """
    Convert a locale-formatted number to a float.

    >>> convert_locale_number("1.234,56")
    1234.56
    >>> convert_locale_number("$1,234.56", "US")
    1234.56

    Raises:
        LocaleNumberError: the string is not a number in that locale's notation.
    """
    try:
        jurisdiction = Jurisdiction(jurisdiction.upper())
    except ValueError as e:
        raise LocaleNumberError(value) from e

    text = _SYMBOL.sub("", value.strip())
    if not _GROUPED[jurisdiction].fullmatch(text):
        raise LocaleNumberError(value)
    thousands, decimal = SEPARATORS[jurisdiction]
    return float(text.replace(thousands, "").replace(decimal, "."))


def positive_amount(amount: float) -> bool:
    return amount > 0


def within_limit(amount: float, limit: float) -> bool:
    return amount <= limit


def percentage(value: float) -> bool:
    """True for 0..100 inclusive."""
    return 0 <= value <= 100


def decimal_places(number: float) -> bool:
    """True when a non-negative number has at most two decimal places."""
    return _TWO_DECIMALS.fullmatch(repr(float(number))) is not None


def amount_in_range(amount: float, minimum: float, maximum: float) -> bool:
    return minimum <= amount <= maximum
