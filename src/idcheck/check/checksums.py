"""
Check-digit and checksum algorithms.

What this does
--------------
Holds the four parameterized algorithm families used by the rule packs:

  - WeightedMod11    -> CPF, CNPJ, PIS/PASEP, CNH, voter registration, RENAVAM
  - Luhn             -> SIN, card numbers
  - Mod97Rearranged  -> IBAN
  - VinWeighted      -> vehicle chassis numbers (VIN)

plus ``NoChecksum`` for pattern-only fields.

Contract
--------
Every verifier assumes its input already passed the field's pattern (right length,
right characters). Verifiers are total over such input: they never raise, they only
return False. Degenerate values (one digit repeated, all zeros) are detected by
:func:`is_degenerate` *before* any arithmetic runs, because weighted sums over a
repeated digit can land on a matching check digit by accident.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from ..exceptions import RuleConfigError


# ---- mod-11 remainder policies ------------------------------------------------------------

def _complement(total: int) -> int:
    """remainder < 2 -> 0, else 11 - remainder (CNPJ, PIS/PASEP, RENAVAM)."""
    r = total % 11
    return 0 if r < 2 else 11 - r


def _times_ten(total: int) -> int:
    """(10 * sum mod 11) mod 10 (CPF)."""
    return (10 * total) % 11 % 10


def _remainder(total: int) -> int:
    """remainder itself, 10 collapses to 0 (CNH, voter registration)."""
    r = total % 11
    return 0 if r >= 10 else r


MOD11_POLICIES: Dict[str, Callable[[int], int]] = {
    "complement": _complement,
    "times_ten": _times_ten,
    "remainder": _remainder,
}


# ---- VIN tables (ISO 3779 / FMVSS 115) ---------------------------------------------------

VIN_LETTER_VALUES: Mapping[str, int] = MappingProxyType({
    "A": 1, "B": 2, "C": 3, "D": 4, "E": 5, "F": 6, "G": 7, "H": 8,
    "J": 1, "K": 2, "L": 3, "M": 4, "N": 5, "P": 7, "R": 9,
    "S": 2, "T": 3, "U": 4, "V": 5, "W": 6, "X": 7, "Y": 8, "Z": 9,
})

VIN_WEIGHTS: Tuple[int, ...] = (8, 7, 6, 5, 4, 3, 2, 10, 0, 9, 8, 7, 6, 5, 4, 3, 2)


# ---- Checksum variants -------------------------------------------------------------------

@dataclass(frozen=True)
class WeightedMod11:
    """
    One weight tuple per check digit. The check digit at ``check_positions[k]`` is
    computed from ``digits[:check_positions[k]]`` and ``weights[k]``.
    """

    weights: Tuple[Tuple[int, ...], ...]
    check_positions: Tuple[int, ...]
    policy: str = "complement"
    reject_repeated: bool = True

    kind: ClassVar[str] = "weighted_mod11"

    def __post_init__(self) -> None:
        if self.policy not in MOD11_POLICIES:
            raise RuleConfigError(f"unknown mod-11 policy {self.policy!r}")
        if len(self.weights) != len(self.check_positions):
            raise RuleConfigError("weighted_mod11 needs one weight list per check position")
        for w, t in zip(self.weights, self.check_positions):
            if len(w) != t:
                raise RuleConfigError(
                    f"check position {t} needs {t} weights, got {len(w)}"
                )


@dataclass(frozen=True)
class Luhn:
    reject_all_zero: bool = False

    kind: ClassVar[str] = "luhn"


@dataclass(frozen=True)
class Mod97Rearranged:
    rotate: int = 4
    chunk_size: int = 9

    kind: ClassVar[str] = "mod97"


@dataclass(frozen=True)
class VinWeighted:
    letter_map: Mapping[str, int] = field(default_factory=lambda: VIN_LETTER_VALUES)
    weights: Tuple[int, ...] = VIN_WEIGHTS
    check_position: int = 8

    kind: ClassVar[str] = "vin"


@dataclass(frozen=True)
class NoChecksum:
    kind: ClassVar[str] = "none"


ChecksumSpec = Union[WeightedMod11, Luhn, Mod97Rearranged, VinWeighted, NoChecksum]


# ---- Algorithms ---------------------------------------------------------------------------

def _digit_values(s: str) -> List[int]:
    return [ord(ch) - 48 for ch in s]  # '0' -> 48


def weighted_mod11_ok(s: str, spec: WeightedMod11) -> bool:
    """
    Verify every check digit of ``s`` in order; all must match.

    For each check position ``t``: ``sum(digit[i] * weight[i] for i < t)`` is mapped
    through the remainder policy and compared with ``digit[t]``.
    """
    digits = _digit_values(s)
    policy = MOD11_POLICIES[spec.policy]
    for weights, t in zip(spec.weights, spec.check_positions):
        if t >= len(digits):
            return False
        total = sum(d * w for d, w in zip(digits[:t], weights))
        if policy(total) != digits[t]:
            return False
    return True


def luhn_ok(s: str) -> bool:
    """
    Validate a digit string using the Luhn checksum (a.k.a. "mod 10").

    Walk right to left and double every second digit starting from the
    second-to-last; doubled values above 9 lose 9. Valid iff the sum is a multiple
    of 10.
    """
    total = 0
    for i, ch in enumerate(reversed(s)):
        d = ord(ch) - 48
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9  # sum of digits for doubled value (e.g., 8*2 -> 16 -> 1+6 -> 7)
        total += d
    return (total % 10) == 0


def mod97_remainder(numeric: str, chunk_size: int = 9) -> int:
    """
    Reduce a long decimal string modulo 97 without building a huge integer.

    The running remainder is carried forward in decimal string form:
    ``rem = int(str(rem) + chunk) % 97``.
    """
    rem = 0
    for i in range(0, len(numeric), chunk_size):
        rem = int(str(rem) + numeric[i : i + chunk_size]) % 97
    return rem


def mod97_ok(s: str, spec: Mod97Rearranged) -> bool:
    """
    Validate an IBAN-style value.

    Steps:
      1) Move the first ``rotate`` chars to the end.
      2) Replace letters A..Z with 10..35.
      3) Reduce the digit string mod 97; a valid value yields remainder 1.
    """
    s = s.upper()
    rearr = s[spec.rotate :] + s[: spec.rotate]

    conv_chunks = []
    for ch in rearr:
        if "0" <= ch <= "9":
            conv_chunks.append(ch)
        elif "A" <= ch <= "Z":
            conv_chunks.append(str(ord(ch) - 55))  # ord('A') == 65 -> 10
        else:
            return False

    num = "".join(conv_chunks)
    if not num:
        return False
    return mod97_remainder(num, spec.chunk_size) == 1


def vin_check_char(s: str, spec: VinWeighted) -> Optional[str]:
    """Expected check character for ``s`` ('0'..'9' or 'X'), or None if a char has no value."""
    if len(s) != len(spec.weights):
        return None
    total = 0
    for ch, weight in zip(s, spec.weights):
        if "0" <= ch <= "9":
            value = ord(ch) - 48
        else:
            value = spec.letter_map.get(ch)
            if value is None:
                return None
        total += value * weight
    r = total % 11
    return "X" if r == 10 else str(r)


def vin_ok(s: str, spec: VinWeighted) -> bool:
    expected = vin_check_char(s, spec)
    return expected is not None and s[spec.check_position] == expected


# Map checksum types to verifiers.
_VERIFIERS: Dict[type, Callable[[str, Any], bool]] = {
    WeightedMod11: weighted_mod11_ok,
    Luhn: lambda s, spec: luhn_ok(s),
    Mod97Rearranged: mod97_ok,
    VinWeighted: vin_ok,
    NoChecksum: lambda s, spec: True,
}


def verify(value: str, spec: ChecksumSpec) -> bool:
    """Run the algorithm described by ``spec`` over an already pattern-valid value."""
    return _VERIFIERS[type(spec)](value, spec)


def is_degenerate(value: str, spec: ChecksumSpec) -> bool:
    """
    True for structurally valid but trivially invalid values: a single repeated
    digit ("11111111111") for mod-11 fields, all zeros for Luhn fields that opt in.
    """
    if isinstance(spec, WeightedMod11) and spec.reject_repeated:
        return len(set(value)) == 1
    if isinstance(spec, Luhn) and spec.reject_all_zero:
        return bool(value) and set(value) == {"0"}
    return False


# ---- Check digit generation ---------------------------------------------------------------

def mod11_check_digits(body: str, spec: WeightedMod11) -> str:
    """
    Compute the check digits that complete ``body`` under ``spec``.

    ``body`` holds the digits before the first check position. Later check digits
    are computed over the earlier ones, exactly as :func:`weighted_mod11_ok` reads them.
    """
    digits = _digit_values(body)
    policy = MOD11_POLICIES[spec.policy]
    out = []
    for weights, t in zip(spec.weights, spec.check_positions):
        d = policy(sum(x * w for x, w in zip(digits[:t], weights)))
        digits.append(d)
        out.append(str(d))
    return "".join(out)


def luhn_check_digit(body: str) -> str:
    """The digit that, appended to ``body``, makes it pass :func:`luhn_ok`."""
    total = 0
    # With a trailing check digit appended, the body's last digit is doubled.
    for i, ch in enumerate(reversed(body)):
        d = ord(ch) - 48
        if i % 2 == 0:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return str((10 - total % 10) % 10)


# ---- YAML -> checksum --------------------------------------------------------------------

def _mod11_from_spec(spec: Mapping[str, Any]) -> WeightedMod11:
    positions = spec.get("check_positions")
    if positions is None and "check_position" in spec:
        positions = [spec["check_position"]]
    if not positions:
        raise RuleConfigError("weighted_mod11 needs check_positions")
    positions = tuple(int(p) for p in positions)

    raw = spec.get("weights")
    if not raw:
        raise RuleConfigError("weighted_mod11 needs weights")
    if all(isinstance(w, int) for w in raw):
        # A single list is right-aligned against each check position.
        flat = tuple(raw)
        if any(t > len(flat) for t in positions):
            raise RuleConfigError(f"{len(flat)} weights cannot cover check positions {positions}")
        weights = tuple(flat[len(flat) - t :] for t in positions)
    else:
        weights = tuple(tuple(int(x) for x in w) for w in raw)

    return WeightedMod11(
        weights=weights,
        check_positions=positions,
        policy=spec.get("policy", "complement"),
        reject_repeated=bool(spec.get("reject_repeated", True)),
    )


def _vin_from_spec(spec: Mapping[str, Any]) -> VinWeighted:
    letter_map = spec.get("letter_map")
    return VinWeighted(
        letter_map=MappingProxyType(dict(letter_map)) if letter_map else VIN_LETTER_VALUES,
        weights=tuple(spec.get("weights", VIN_WEIGHTS)),
        check_position=int(spec.get("check_position", 8)),
    )


def checksum_from_spec(spec: Union[None, str, Mapping[str, Any]]) -> ChecksumSpec:
    """
    Build a checksum spec from its rule-pack form.

    Accepts ``None`` / ``"none"``, a bare kind name (``"luhn"``, ``"mod97"``,
    ``"vin"``) or a mapping with a ``kind`` key and the variant's parameters.
    """
    if spec is None:
        return NoChecksum()
    if isinstance(spec, str):
        spec = {"kind": spec}
    if not isinstance(spec, Mapping):
        raise RuleConfigError(f"checksum must be a string or a mapping, got {spec!r}")

    kind = spec.get("kind")
    if kind == "none":
        return NoChecksum()
    if kind == "weighted_mod11":
        return _mod11_from_spec(spec)
    if kind == "luhn":
        return Luhn(reject_all_zero=bool(spec.get("reject_all_zero", False)))
    if kind == "mod97":
        return Mod97Rearranged(
            rotate=int(spec.get("rotate", 4)),
            chunk_size=int(spec.get("chunk_size", 9)),
        )
    if kind == "vin":
        return _vin_from_spec(spec)
    raise RuleConfigError(f"unknown checksum kind {kind!r}")

