"""
Data-driven rule registry.

What this does
--------------
- Loads YAML "rule packs" (one per jurisdiction) from ``idcheck/check/rulesets``.
- Compiles each field entry into an immutable :class:`ValidationRule`: a
  normalization policy, a :class:`Pattern`, a checksum spec, an optional raw-input
  mask and bound constraints.
- Resolves region-dependent fields against a :class:`RegionPatternTable`; one rule
  per (field, region) is built up front.
- Answers ``lookup(jurisdiction, domain, field, region)`` from frozen maps.

The registry is built once (at process start or on first use) and only read
afterwards. Every problem with the packs or the reference data raises
:class:`RuleConfigError` here, at build time, never during validation.

Pack layout::

    jurisdiction: BR
    domains:
      personal:
        cpf:
          normalize: digits_only
          pattern: {length: 11, charset: digits}
          checksum: {kind: weighted_mod11, weights: [...], check_positions: [9, 10]}
        rg:
          normalize: none
          region_table: br_rg
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from importlib import resources
import re
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import structlog
import yaml

from ..exceptions import RuleConfigError
from ..models import Domain, Field, Jurisdiction, RuleKey
from .checksums import ChecksumSpec, NoChecksum, checksum_from_spec
from .constraints import Constraint, ConstraintContext, build_constraint, is_valid_email
from .normalizers import NormalizationPolicy
from .patterns import Pattern
from .reference import IdentifierTable, RegionPatternTable, load_identifier_table, load_region_tables

log = structlog.get_logger(__name__)

RULESETS_PACKAGE = "idcheck.check.rulesets"
DEFAULT_PACKS: Tuple[str, ...] = ("br", "ca", "us")

_RULE_KEYS = {"normalize", "pattern", "region_table", "checksum", "mask", "constraints"}


@dataclass(frozen=True)
class ValidationRule:
    """Everything needed to validate one field. Shared by all callers, never mutated."""

    key: RuleKey
    normalization: NormalizationPolicy
    pattern: Optional[Pattern]
    checksum: ChecksumSpec = field(default_factory=NoChecksum)
    mask: Optional[re.Pattern] = None
    constraints: Tuple[Constraint, ...] = ()
    region_table: Optional[str] = None
    region: Optional[str] = None

    @property
    def regional(self) -> bool:
        return self.region_table is not None


# ---- Pack parsing -------------------------------------------------------------------------

def _parse_rule(key: RuleKey, spec: Any, ctx: ConstraintContext, source: str) -> ValidationRule:
    where = f"{source}:{key}"
    if not isinstance(spec, Mapping):
        raise RuleConfigError("rule must be a mapping", where)
    unknown = set(spec) - _RULE_KEYS
    if unknown:
        raise RuleConfigError(f"unknown rule keys {sorted(unknown)}", where)

    try:
        normalization = NormalizationPolicy(spec.get("normalize", "none"))
    except ValueError as e:
        raise RuleConfigError(f"unknown normalization {spec.get('normalize')!r}", where) from e

    region_table = spec.get("region_table")
    if region_table and "pattern" in spec:
        raise RuleConfigError("use either pattern or region_table, not both", where)
    if not region_table and "pattern" not in spec:
        raise RuleConfigError("rule needs a pattern or a region_table", where)
    pattern = None if region_table else Pattern.from_spec(spec["pattern"], where)

    mask = None
    if spec.get("mask"):
        try:
            mask = re.compile(spec["mask"])
        except re.error as e:
            raise RuleConfigError(f"bad mask {spec['mask']!r}: {e}", where) from e

    try:
        checksum = checksum_from_spec(spec.get("checksum"))
        constraints = tuple(build_constraint(c, ctx) for c in spec.get("constraints") or ())
    except RuleConfigError as e:
        raise RuleConfigError(str(e), where) from e

    return ValidationRule(
        key=key,
        normalization=normalization,
        pattern=pattern,
        checksum=checksum,
        mask=mask,
        constraints=constraints,
        region_table=region_table,
    )


def parse_rule_pack(data: Mapping[str, Any], ctx: ConstraintContext, source: str = "<pack>") -> List[ValidationRule]:
    """Compile a loaded pack into base rules (regional rules still carry no pattern)."""
    try:
        jurisdiction = Jurisdiction(str(data.get("jurisdiction", "")).upper())
    except ValueError as e:
        raise RuleConfigError(f"unknown jurisdiction {data.get('jurisdiction')!r}", source) from e

    rules: List[ValidationRule] = []
    for domain_name, fields in (data.get("domains") or {}).items():
        try:
            domain = Domain(domain_name)
        except ValueError as e:
            raise RuleConfigError(f"unknown domain {domain_name!r}", source) from e
        for field_name, spec in (fields or {}).items():
            try:
                fld = Field(field_name)
            except ValueError as e:
                raise RuleConfigError(f"unknown field {field_name!r}", source) from e
            rules.append(_parse_rule(RuleKey(jurisdiction, domain, fld), spec, ctx, source))
    return rules


def read_rule_pack(name: str) -> Dict[str, Any]:
    """Read a shipped pack (``"br"`` -> ``idcheck/check/rulesets/br.yaml``)."""
    fname = f"{name}.yaml"
    try:
        text = resources.files(RULESETS_PACKAGE).joinpath(fname).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise RuleConfigError(f"no rule pack named {name!r}", RULESETS_PACKAGE) from e
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise RuleConfigError(f"invalid YAML: {e}", fname) from e


# ---- Registry -----------------------------------------------------------------------------

class RuleRegistry:
    """
    Immutable ``(jurisdiction, domain, field, region?) -> ValidationRule`` map.

    Use :meth:`build` (or :meth:`from_config`) rather than the constructor; it wires
    in the shipped packs and reference data, any of which can be replaced.
    """

    def __init__(
        self,
        rules: Mapping[RuleKey, ValidationRule],
        regional: Mapping[Tuple[RuleKey, str], ValidationRule],
    ) -> None:
        self._rules: Mapping[RuleKey, ValidationRule] = MappingProxyType(dict(rules))
        self._regional: Mapping[Tuple[RuleKey, str], ValidationRule] = MappingProxyType(dict(regional))

    @classmethod
    def build(
        cls,
        packs: Sequence[str] = DEFAULT_PACKS,
        *,
        pack_data: Optional[Mapping[str, Mapping[str, Any]]] = None,
        region_tables: Optional[RegionPatternTable] = None,
        identifier_tables: Optional[Mapping[str, IdentifierTable]] = None,
        email_validator: Optional[Callable[[str], bool]] = None,
    ) -> "RuleRegistry":
        """
        Load and compile rule packs.

        Args:
            packs: names of shipped packs to load.
            pack_data: already-parsed packs keyed by a source name; loaded after ``packs``.
            region_tables: region pattern provider (defaults to the shipped tables).
            identifier_tables: named membership tables (defaults to ``{"ispb": ...}``).
            email_validator: predicate used by the ``email`` constraint.
        """
        region_tables = region_tables if region_tables is not None else load_region_tables()
        if identifier_tables is None:
            identifier_tables = {"ispb": load_identifier_table()}
        ctx = ConstraintContext(
            identifier_tables=MappingProxyType(dict(identifier_tables)),
            email_validator=email_validator or is_valid_email,
        )

        sources: List[Tuple[str, Mapping[str, Any]]] = [(f"{p}.yaml", read_rule_pack(p)) for p in packs]
        sources.extend((pack_data or {}).items())

        rules: Dict[RuleKey, ValidationRule] = {}
        regional: Dict[Tuple[RuleKey, str], ValidationRule] = {}
        for source, data in sources:
            parsed = parse_rule_pack(data, ctx, source)
            for rule in parsed:
                if rule.key in rules:
                    raise RuleConfigError(f"duplicate rule {rule.key}", source)
                rules[rule.key] = rule
                if rule.regional:
                    regional.update(cls._expand_regions(rule, region_tables, source))
            log.info("rule_pack_loaded", pack=source, rules=len(parsed))

        log.info("registry_built", rules=len(rules), regional_rules=len(regional))
        return cls(rules, regional)

    @classmethod
    def from_config(cls, cfg: Any) -> "RuleRegistry":
        """Build from an :class:`idcheck.config.IdCheckConfig`."""
        ref = cfg.reference
        return cls.build(
            packs=cfg.rule_packs.enabled(),
            region_tables=load_region_tables(ref.region_tables),
            identifier_tables={"ispb": load_identifier_table(ref.identifier_table)},
        )

    @staticmethod
    def _expand_regions(
        rule: ValidationRule, tables: RegionPatternTable, source: str
    ) -> Dict[Tuple[RuleKey, str], ValidationRule]:
        if not tables.has_table(rule.region_table):
            raise RuleConfigError(f"unknown region table {rule.region_table!r}", f"{source}:{rule.key}")
        out = {}
        for region in tables.regions(rule.region_table):
            pattern = tables.lookup_region_pattern(rule.region_table, region)
            out[(rule.key, region)] = replace(rule, pattern=pattern, region=region)
        return out

    # -- lookups -------------------------------------------------------------------------------

    @staticmethod
    def _key(jurisdiction: Any, domain: Any, field: Any) -> Optional[RuleKey]:
        try:
            return RuleKey(
                Jurisdiction(jurisdiction.upper()),
                Domain(domain.lower()),
                Field(field.lower()),
            )
        except (ValueError, AttributeError):
            return None

    def lookup(
        self,
        jurisdiction: Jurisdiction | str,
        domain: Domain | str,
        field: Field | str,
        region: Optional[str] = None,
    ) -> Optional[ValidationRule]:
        """
        Return the rule for the key, or None when nothing is registered.

        Region-dependent fields need a region present in their table; a region passed
        for any other field is ignored.
        """
        key = self._key(jurisdiction, domain, field)
        if key is None:
            return None
        rule = self._rules.get(key)
        if rule is None or not rule.regional:
            return rule
        if not region:
            return None
        return self._regional.get((key, region.strip().upper()))

    def __contains__(self, key: RuleKey) -> bool:
        return key in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def keys(self) -> List[RuleKey]:
        return sorted(self._rules, key=str)

    def rules(self, jurisdiction: Optional[Jurisdiction | str] = None) -> Iterable[ValidationRule]:
        """Base rules (regional ones without a resolved pattern), sorted by key."""
        for key in self.keys():
            if jurisdiction is None or key.jurisdiction is Jurisdiction(jurisdiction.upper()):
                yield self._rules[key]

    def regions(self, key: RuleKey) -> List[str]:
        return sorted(region for (k, region) in self._regional if k == key)
