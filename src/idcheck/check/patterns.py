"""
Declarative shape checks evaluated on normalized values.

A :class:`Pattern` combines cheap structural predicates (length range, character
class, fixed prefix) with optional regex *alternatives*. Alternatives are tried in
declaration order; the value is accepted if any one of them fully matches. Rule
packs keep alternatives structurally exclusive (e.g. a standard plate ``ABC1234``
can never be a Mercosul plate ``ABC1D23``), so the order never changes the answer.

YAML shapes accepted by :meth:`Pattern.from_spec`::

    pattern: "\\d{11}"                  # shorthand: a single alternative

    pattern:
      length: 29                        # or min_length / max_length
      charset: alnum                    # digits | letters | alnum | any
      prefix: BR
      alternatives:
        - "[A-Z]{3}\\d{4}"
        - "[A-Z]{3}\\d[A-Z]\\d{2}"
"""

from __future__ import annotations

from dataclasses import dataclass
import re
import string
from typing import Any, Mapping, Optional, Tuple

from ..exceptions import RuleConfigError

_CHARSETS = {
    "digits": frozenset(string.digits),
    "letters": frozenset(string.ascii_letters),
    "alnum": frozenset(string.ascii_letters + string.digits),
    "any": None,
}


@dataclass(frozen=True)
class Pattern:
    min_length: int = 0
    max_length: Optional[int] = None
    charset: str = "any"
    prefix: str = ""
    alternatives: Tuple[re.Pattern, ...] = ()

    def describe(self) -> str:
        """Short human-readable form, used by the CLI rule listing."""
        parts = []
        if self.max_length is not None and self.max_length == self.min_length:
            parts.append(f"len={self.min_length}")
        elif self.min_length or self.max_length is not None:
            hi = "" if self.max_length is None else self.max_length
            parts.append(f"len={self.min_length}..{hi}")
        if self.charset != "any":
            parts.append(self.charset)
        if self.prefix:
            parts.append(f"prefix={self.prefix}")
        if self.alternatives:
            parts.append(" | ".join(p.pattern for p in self.alternatives))
        return ", ".join(parts) or "any"

    @classmethod
    def from_spec(cls, spec: Any, source: str = "") -> "Pattern":
        if isinstance(spec, str):
            return cls(alternatives=(_compile(spec, source),))
        if not isinstance(spec, Mapping):
            raise RuleConfigError(f"pattern must be a string or a mapping, got {spec!r}", source)

        charset = spec.get("charset", "any")
        if charset not in _CHARSETS:
            raise RuleConfigError(f"unknown charset {charset!r}", source)

        if "length" in spec:
            min_length = max_length = int(spec["length"])
        else:
            min_length = int(spec.get("min_length", 0))
            max_length = spec.get("max_length")
            max_length = int(max_length) if max_length is not None else None
        if max_length is not None and max_length < min_length:
            raise RuleConfigError(f"max_length {max_length} < min_length {min_length}", source)

        alternatives = spec.get("alternatives") or []
        if isinstance(alternatives, str):
            alternatives = [alternatives]
        if "regex" in spec:
            alternatives = [spec["regex"], *alternatives]

        return cls(
            min_length=min_length,
            max_length=max_length,
            charset=charset,
            prefix=str(spec.get("prefix", "")),
            alternatives=tuple(_compile(p, source) for p in alternatives),
        )


def _compile(regex: str, source: str) -> re.Pattern:
    try:
        return re.compile(regex)
    except re.error as e:
        raise RuleConfigError(f"bad regex {regex!r}: {e}", source) from e


def matches(value: str, pattern: Pattern) -> bool:
    """
    Return True if ``value`` has the shape described by ``pattern``.

    Order of checks: length, character class, prefix, then the alternatives
    (first full match wins).
    """
    n = len(value)
    if n < pattern.min_length:
        return False
    if pattern.max_length is not None and n > pattern.max_length:
        return False

    allowed = _CHARSETS[pattern.charset]
    if allowed is not None and not all(ch in allowed for ch in value):
        return False

    if pattern.prefix and not value.startswith(pattern.prefix):
        return False

    if not pattern.alternatives:
        return True
    return any(p.fullmatch(value) for p in pattern.alternatives)
