"""
Normalization policies applied to raw input before pattern and checksum checks.

Every policy is a pure ``str -> str`` function that drops characters outside its
class and never raises. Only ASCII digits/letters are retained, so a normalized
value is always a legal input for the checksum engine (``"١٢٣"`` is dropped, not
kept as a digit).

Normalization is idempotent: ``normalize(normalize(s, p), p) == normalize(s, p)``.
"""

from __future__ import annotations

from enum import Enum
import string
from typing import Callable, Dict

_DIGITS = frozenset(string.digits)
_ALNUM = frozenset(string.ascii_letters + string.digits)


class NormalizationPolicy(str, Enum):
    digits_only = "digits_only"
    alphanumeric_only = "alphanumeric_only"
    alphanumeric_uppercase = "alphanumeric_uppercase"
    trim = "trim"
    none = "none"


def digits_only(s: str) -> str:
    """
    Return only the ASCII digits of a string.

    "123.456.789-09" -> "12345678909"
    """
    return "".join(ch for ch in s if ch in _DIGITS)


def alphanumeric_only(s: str) -> str:
    """Keep ASCII letters and digits, preserving case."""
    return "".join(ch for ch in s if ch in _ALNUM)


def alphanumeric_uppercase(s: str) -> str:
    """
    Keep ASCII letters and digits and upper-case the result.

    Used for plates, VINs and IBANs so that "abc-1d23" and "ABC1D23" compare equal.
    """
    return alphanumeric_only(s).upper()


def trim(s: str) -> str:
    return s.strip()


def identity(s: str) -> str:
    return s


# Map policy names (as used in the YAML rule packs) to callables.
_NORMALIZERS: Dict[NormalizationPolicy, Callable[[str], str]] = {
    NormalizationPolicy.digits_only: digits_only,
    NormalizationPolicy.alphanumeric_only: alphanumeric_only,
    NormalizationPolicy.alphanumeric_uppercase: alphanumeric_uppercase,
    NormalizationPolicy.trim: trim,
    NormalizationPolicy.none: identity,
}


def normalize(raw: str, policy: NormalizationPolicy) -> str:
    """Apply ``policy`` to ``raw``."""
    return _NORMALIZERS[policy](raw)
