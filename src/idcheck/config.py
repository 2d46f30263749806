from __future__ import annotations

from pathlib import Path
from typing import List, Literal, Optional
import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import RuleConfigError

# ---- Rule packs (which jurisdictions get registered) ----
class RulePacks(BaseModel):
    br: bool = True   # CPF, CNPJ, RG, bank, vehicle, currency...
    ca: bool = True   # SIN, provincial driver's licences
    us: bool = True   # SSN, state driver's licences

    def enabled(self) -> List[str]:
        return [name for name, on in self.model_dump().items() if on]


# ---- Static reference data (None -> copy shipped with the package) ----
class ReferenceData(BaseModel):
    region_tables: Optional[Path] = None
    identifier_table: Optional[Path] = None


# ---- Root config ----
class IdCheckConfig(BaseModel):
    rule_packs: RulePacks = Field(default_factory=RulePacks)
    reference: ReferenceData = Field(default_factory=ReferenceData)
    log_level: Literal["debug", "info", "warning", "error"] = "warning"


# ---- Loader ----
def load_config(path: Optional[Path]) -> IdCheckConfig:
    if not path:
        return IdCheckConfig()
    data = yaml.safe_load(Path(path).read_text()) or {}
    try:
        return IdCheckConfig(**data)
    except (TypeError, ValidationError) as e:
        raise RuleConfigError(str(e), str(path)) from e
