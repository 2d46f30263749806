"""
Runs one request through the rule selected for it.

Order of checks (the first failure wins):
  1. lookup       -> unknown_rule
  2. raw mask     -> invalid_format
  3. normalize
  4. pattern      -> invalid_format
  5. constraints  -> invalid_format
  6. degenerate   -> degenerate_input
  7. checksum     -> checksum_mismatch

The checksum never sees a value that failed steps 4-6.
"""

from __future__ import annotations

import structlog

from ..check.checksums import is_degenerate, verify
from ..check.normalizers import normalize
from ..check.patterns import matches
from ..check.registry import RuleRegistry, ValidationRule
from ..models import Outcome, ValidationOutcome, ValidationRequest

log = structlog.get_logger(__name__)


class ValidationDispatcher:
    """Stateless apart from the (immutable) registry; safe to share between threads."""

    def __init__(self, registry: RuleRegistry) -> None:
        self.registry = registry

    def validate(self, request: ValidationRequest) -> ValidationOutcome:
        rule = self.registry.lookup(request.jurisdiction, request.domain, request.field, request.region)
        if rule is None:
            outcome = ValidationOutcome(Outcome.unknown_rule)
        else:
            outcome = self._run(rule, request.raw_value)
        log.debug(
            "validation_outcome",
            jurisdiction=request.jurisdiction.value,
            domain=request.domain.value,
            field=request.field.value,
            region=request.region,
            outcome=outcome.kind.value,
        )
        return outcome

    @staticmethod
    def _run(rule: ValidationRule, raw: str) -> ValidationOutcome:
        if rule.mask is not None and not rule.mask.fullmatch(raw.strip()):
            return ValidationOutcome(Outcome.invalid_format)

        value = normalize(raw, rule.normalization)
        if rule.pattern is None or not matches(value, rule.pattern):
            return ValidationOutcome(Outcome.invalid_format, value)
        if not all(c(value) for c in rule.constraints):
            return ValidationOutcome(Outcome.invalid_format, value)

        if is_degenerate(value, rule.checksum):
            return ValidationOutcome(Outcome.degenerate_input, value)
        if not verify(value, rule.checksum):
            return ValidationOutcome(Outcome.checksum_mismatch, value)
        return ValidationOutcome(Outcome.valid, value)
