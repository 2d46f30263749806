"""
idcheck: structural and check-digit validation of identification numbers
(Brazil, Canada, United States).

    >>> from idcheck import validate_field
    >>> validate_field("BR", "personal", "cpf", "123.456.789-09")
    True
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from .currency import convert_locale_number
from .engine.dispatcher import ValidationDispatcher
from .check.registry import RuleRegistry
from .exceptions import IdCheckError, LocaleNumberError, RuleConfigError
from .models import Outcome, ValidationOutcome, ValidationRequest

__version__ = "0.1.0"

__all__ = [
    "IdCheckError",
    "LocaleNumberError",
    "Outcome",
    "RuleConfigError",
    "RuleRegistry",
    "ValidationDispatcher",
    "ValidationOutcome",
    "ValidationRequest",
    "check_field",
    "convert_locale_number",
    "default_dispatcher",
    "validate_field",
]


@lru_cache(maxsize=1)
def default_dispatcher() -> ValidationDispatcher:
    """Process-wide dispatcher over the shipped rule packs, built on first use."""
    return ValidationDispatcher(RuleRegistry.build())


def check_field(
    jurisdiction: str,
    domain: str,
    field: str,
    value: str,
    region: Optional[str] = None,
) -> ValidationOutcome:
    """Validate one value and say why it failed. Unknown names give ``unknown_rule``."""
    try:
        request = ValidationRequest.build(jurisdiction, domain, field, value, region)
    except (ValueError, AttributeError):
        return ValidationOutcome(Outcome.unknown_rule)
    return default_dispatcher().validate(request)


def validate_field(
    jurisdiction: str,
    domain: str,
    field: str,
    value: str,
    region: Optional[str] = None,
) -> bool:
    return check_field(jurisdiction, domain, field, value, region).valid
