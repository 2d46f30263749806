"""
Request/result types shared by the registry, the dispatcher and the outer surfaces.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Jurisdiction(str, Enum):
    BR = "BR"
    CA = "CA"
    US = "US"


class Domain(str, Enum):
    personal = "personal"
    company = "company"
    bank = "bank"
    vehicle = "vehicle"
    currency = "currency"


class Field(str, Enum):
    """Every field name a rule pack may register."""

    # personal
    cpf = "cpf"
    cin = "cin"
    rg = "rg"
    cns = "cns"
    birth_date = "birth_date"
    full_name = "full_name"
    pis_pasep = "pis_pasep"
    voter_registration = "voter_registration"
    email = "email"
    cnh = "cnh"
    passport = "passport"
    phone = "phone"
    phone_without_area_code = "phone_without_area_code"
    sin = "sin"
    ssn = "ssn"
    drivers_license = "drivers_license"
    # company
    cnpj = "cnpj"
    corporate_name = "corporate_name"
    state_registration = "state_registration"
    nire = "nire"
    # bank
    bank_code = "bank_code"
    branch = "branch"
    account_number = "account_number"
    boleto = "boleto"
    compensation_code = "compensation_code"
    card_number = "card_number"
    bin = "bin"
    ispb = "ispb"
    swift = "swift"
    iban = "iban"
    # vehicle
    plate = "plate"
    renavam = "renavam"
    chassis = "chassis"
    category = "category"
    # currency
    brl_format = "brl_format"
    numeric_format = "numeric_format"
    exchange_rate = "exchange_rate"


class Outcome(str, Enum):
    """
    Result kinds of a validation.

    Only ``valid`` is a success. The failure kinds tell *why* a value was rejected:
      - unknown_rule      -> nothing registered for (jurisdiction, domain, field, region)
      - invalid_format    -> wrong length/characters/prefix, or a field constraint failed
      - degenerate_input  -> well formed but trivially invalid (e.g. "00000000000")
      - checksum_mismatch -> shape is fine but the check digit(s) disagree
    """

    valid = "valid"
    unknown_rule = "unknown_rule"
    invalid_format = "invalid_format"
    degenerate_input = "degenerate_input"
    checksum_mismatch = "checksum_mismatch"


@dataclass(frozen=True)
class RuleKey:
    jurisdiction: Jurisdiction
    domain: Domain
    field: Field

    def __str__(self) -> str:
        return f"{self.jurisdiction.value}/{self.domain.value}/{self.field.value}"


@dataclass(frozen=True)
class ValidationRequest:
    """One validation call. Created per call and discarded afterwards."""

    raw_value: str
    jurisdiction: Jurisdiction
    domain: Domain
    field: Field
    region: Optional[str] = None

    @classmethod
    def build(
        cls,
        jurisdiction: str | Jurisdiction,
        domain: str | Domain,
        field: str | Field,
        value: str,
        region: Optional[str] = None,
    ) -> "ValidationRequest":
        """Coerce plain strings into the enum members (raises ValueError on unknown names)."""
        return cls(
            raw_value=value,
            jurisdiction=Jurisdiction(jurisdiction.upper()),
            domain=Domain(domain.lower()),
            field=Field(field.lower()),
            region=region,
        )

    @property
    def key(self) -> RuleKey:
        return RuleKey(self.jurisdiction, self.domain, self.field)


@dataclass(frozen=True)
class ValidationOutcome:
    """Tagged result. Truthy only when the value is valid."""

    kind: Outcome
    normalized: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.kind is Outcome.valid

    def __bool__(self) -> bool:
        return self.valid
