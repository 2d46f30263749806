"""
Exceptions raised by idcheck.

Malformed *user* input never raises: validators report it through
:class:`idcheck.models.Outcome`. Exceptions are reserved for broken configuration
(caught when the registry is built) and for explicit conversions.
"""

from __future__ import annotations


class IdCheckError(Exception):
    """Base class for all idcheck errors."""


class RuleConfigError(IdCheckError):
    """
    A rule pack, region table or reference table is malformed.

    Raised while the rule registry is being built, never while validating.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class LocaleNumberError(IdCheckError, ValueError):
    """A locale-formatted string could not be converted to a number."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"not a locale-formatted number: {value!r}")
