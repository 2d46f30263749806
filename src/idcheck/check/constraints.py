"""
Named field constraints that a shape regex cannot express.

Rule packs list constraints by name, with parameters::

    constraints:
      - email
      - {name: past_date, format: "%Y-%m-%d", min_year: 1900}
      - {name: registered, table: ispb}
      - {name: prefix_in, length: 2, codes: ["11", "21", ...]}

Each name maps to a factory that binds the parameters (and any injected reference
data) into a plain ``str -> bool`` predicate at registry build time. Constraints run
after the pattern matched and before any checksum arithmetic; a failing constraint is
reported as ``invalid_format``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping, Optional

from email_validator import EmailNotValidError, validate_email

from ..exceptions import RuleConfigError
from .reference import IdentifierTable

Predicate = Callable[[str], bool]


def is_valid_email(s: str) -> bool:
    """RFC 5322 syntax check via email-validator (no DNS / deliverability lookups)."""
    try:
        validate_email(s, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


@dataclass(frozen=True)
class Constraint:
    name: str
    check: Predicate = field(compare=False)

    def __call__(self, value: str) -> bool:
        return self.check(value)


@dataclass(frozen=True)
class ConstraintContext:
    """Injected collaborators available to constraint factories."""

    identifier_tables: Mapping[str, IdentifierTable] = field(default_factory=dict)
    email_validator: Predicate = is_valid_email
    today: Callable[[], date] = date.today


# ---- factories ----------------------------------------------------------------------------

def _email(params: Mapping[str, Any], ctx: ConstraintContext) -> Predicate:
    return ctx.email_validator


def _past_date(params: Mapping[str, Any], ctx: ConstraintContext) -> Predicate:
    fmt = params.get("format", "%Y-%m-%d")
    min_year = params.get("min_year")

    def check(value: str) -> bool:
        try:
            parsed = datetime.strptime(value, fmt).date()
        except ValueError:
            return False
        # strptime accepts "1990-1-1" for "%Y-%m-%d"; require the canonical spelling
        if parsed.strftime(fmt) != value:
            return False
        if min_year is not None and parsed.year < int(min_year):
            return False
        return parsed < ctx.today()

    return check


def _registered(params: Mapping[str, Any], ctx: ConstraintContext) -> Predicate:
    name = params.get("table")
    table = ctx.identifier_tables.get(name)
    if table is None:
        raise RuleConfigError(f"constraint 'registered' refers to unknown table {name!r}")
    return table.contains


def _prefix_in(params: Mapping[str, Any], ctx: ConstraintContext) -> Predicate:
    length = int(params.get("length", 2))
    codes = frozenset(str(c) for c in params.get("codes") or ())
    if not codes:
        raise RuleConfigError("constraint 'prefix_in' needs a non-empty codes list")
    return lambda value: value[:length] in codes


# Map constraint names (as used in YAML) to factories.
_FACTORIES: Dict[str, Callable[[Mapping[str, Any], ConstraintContext], Predicate]] = {
    "email": _email,
    "past_date": _past_date,
    "registered": _registered,
    "prefix_in": _prefix_in,
}


def build_constraint(spec: Any, ctx: Optional[ConstraintContext] = None) -> Constraint:
    """Turn one YAML constraint entry (name or mapping with ``name``) into a Constraint."""
    ctx = ctx or ConstraintContext()
    if isinstance(spec, str):
        name, params = spec, {}
    elif isinstance(spec, Mapping) and "name" in spec:
        name, params = spec["name"], spec
    else:
        raise RuleConfigError(f"constraint must be a name or a mapping with 'name', got {spec!r}")

    factory = _FACTORIES.get(name)
    if factory is None:
        raise RuleConfigError(f"unknown constraint {name!r}")
    return Constraint(name=name, check=factory(params, ctx))
