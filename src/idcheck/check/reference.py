"""
Static reference data consumed by the rule registry.

Two read-only providers live here:

  - RegionPatternTable: ``(table, region) -> Pattern`` for fields whose shape depends
    on a sub-national code (driver's licences by state/province, RG by UF).
  - IdentifierTable:    exact-match ``code -> name`` table, used as a membership test
    (ISPB participants).

Both are built once from YAML (shipped under ``idcheck/check/data`` or supplied by
the embedding application) and frozen. The registry receives them as constructor
arguments, so tests can inject their own tables.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional

import structlog
import yaml

from ..exceptions import RuleConfigError
from .patterns import Pattern

log = structlog.get_logger(__name__)

_DATA_PACKAGE = "idcheck.check.data"


def _read_yaml(name: str, path: Optional[Path]) -> Dict[str, Any]:
    if path is not None:
        text = Path(path).read_text(encoding="utf-8")
        source = str(path)
    else:
        text = resources.files(_DATA_PACKAGE).joinpath(name).read_text(encoding="utf-8")
        source = f"{_DATA_PACKAGE}/{name}"
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise RuleConfigError(f"invalid YAML: {e}", source) from e
    if not isinstance(data, dict):
        raise RuleConfigError("top level must be a mapping", source)
    return data


def _region_code(code: Any, source: str) -> str:
    if not isinstance(code, str):
        # e.g. an unquoted ON/NO parsed as a boolean by YAML 1.1
        raise RuleConfigError(f"region code {code!r} must be a string", source)
    return code.strip().upper()


class RegionPatternTable:
    """Read-only ``table -> region -> Pattern`` lookup."""

    def __init__(self, tables: Mapping[str, Mapping[str, Pattern]]) -> None:
        self._tables: Mapping[str, Mapping[str, Pattern]] = MappingProxyType(
            {name: MappingProxyType(dict(regions)) for name, regions in tables.items()}
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], source: str = "regions") -> "RegionPatternTable":
        """
        Build from the YAML shape ``{table: {REGION: regex | [regex, ...] | pattern-mapping}}``.
        """
        tables: Dict[str, Dict[str, Pattern]] = {}
        for name, regions in data.items():
            if not isinstance(regions, Mapping):
                raise RuleConfigError(f"table {name!r} must map region codes to patterns", source)
            where = f"{source}:{name}"
            compiled: Dict[str, Pattern] = {}
            for code, spec in regions.items():
                if isinstance(spec, list):
                    spec = {"alternatives": spec}
                compiled[_region_code(code, where)] = Pattern.from_spec(spec, f"{where}.{code}")
            tables[str(name)] = compiled
        return cls(tables)

    def has_table(self, table: str) -> bool:
        return table in self._tables

    def regions(self, table: str) -> Iterable[str]:
        return tuple(self._tables.get(table, {}))

    def lookup_region_pattern(self, table: str, region: Optional[str]) -> Optional[Pattern]:
        """Pattern for ``region`` in ``table``; None when either is unknown."""
        if not region:
            return None
        return self._tables.get(table, {}).get(region.strip().upper())


class IdentifierTable:
    """Read-only exact-match ``code -> name`` table."""

    def __init__(self, entries: Mapping[str, str]) -> None:
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries))

    def __len__(self) -> int:
        return len(self._entries)

    def contains(self, code: str) -> bool:
        return code in self._entries

    def name_of(self, code: str) -> Optional[str]:
        return self._entries.get(code)


def load_region_tables(path: Optional[Path] = None) -> RegionPatternTable:
    """Load region tables from ``path`` or from the copy shipped with the package."""
    data = _read_yaml("regions.yaml", path)
    table = RegionPatternTable.from_mapping(data.get("tables") or {}, str(path or "regions.yaml"))
    log.info("region_tables_loaded", tables=sorted(data.get("tables") or {}))
    return table


def load_identifier_table(path: Optional[Path] = None) -> IdentifierTable:
    """Load the ISPB participant table from ``path`` or from the shipped copy."""
    data = _read_yaml("ispb.yaml", path)
    entries = data.get("participants") or {}
    if not isinstance(entries, Mapping):
        raise RuleConfigError("participants must be a mapping", str(path or "ispb.yaml"))
    for code in entries:
        if not isinstance(code, str):
            # unquoted codes lose their leading zeros
            raise RuleConfigError(f"code {code!r} must be a quoted string", str(path or "ispb.yaml"))
    log.info("identifier_table_loaded", entries=len(entries))
    return IdentifierTable({code: str(name) for code, name in entries.items()})
