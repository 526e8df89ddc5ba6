"""
paint_rewards/core/regions.py

Static region catalog.

Each RegionConfig parameterizes identifier/phone validation and the location
allowlist. No region-specific literal should live outside this module: other
components receive a RegionConfig and apply the same rules to every region.

Synonyms:
- ``aliases`` are extra names that identify the region in a free-text address
  (capital and main cities, alternate spellings).
- ``SubRegion.aliases`` do the same for a city inside a region.
Synonyms are stored in display form; the location validator normalizes them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Pattern, Tuple

from .errors import UnknownRegion


@dataclass(frozen=True)
class SubRegion:
    code: str
    name: str
    aliases: Tuple[str, ...] = ()

    @property
    def synonyms(self) -> Tuple[str, ...]:
        return (self.name,) + self.aliases


@dataclass(frozen=True)
class RegionConfig:
    code: str
    name: str

    requires_identifier: bool
    identifier_label: str
    identifier_min_length: int
    identifier_max_length: int

    phone_pattern: Pattern[str]
    phone_min_length: int
    phone_max_length: int

    identifier_pattern: Optional[Pattern[str]] = None
    identifier_placeholder: str = ""
    phone_placeholder: str = ""

    sub_regions: Tuple[SubRegion, ...] = ()
    aliases: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        if self.requires_identifier and self.identifier_pattern is None:
            raise ValueError(f"Region {self.code} requires an identifier but defines no format pattern")

    @property
    def has_sub_regions(self) -> bool:
        return bool(self.sub_regions)

    @property
    def synonyms(self) -> Tuple[str, ...]:
        """Region-level synonyms: official name, aliases, then every sub-region synonym."""
        names = [self.name, *self.aliases]
        for sub in self.sub_regions:
            names.extend(sub.synonyms)
        return tuple(names)

    def find_sub_region(self, code: Optional[str]) -> Optional[SubRegion]:
        if not code:
            return None
        for sub in self.sub_regions:
            if sub.code == code:
                return sub
        return None

    def to_dict(self) -> dict:
        """Plain representation for registration forms."""
        return {
            "code": self.code,
            "name": self.name,
            "requires_identifier": self.requires_identifier,
            "identifier_label": self.identifier_label,
            "identifier_placeholder": self.identifier_placeholder,
            "identifier_min_length": self.identifier_min_length,
            "identifier_max_length": self.identifier_max_length,
            "phone_placeholder": self.phone_placeholder,
            "phone_min_length": self.phone_min_length,
            "phone_max_length": self.phone_max_length,
            "sub_regions": [{"code": s.code, "name": s.name} for s in self.sub_regions],
        }


# ---------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------
_REGIONS: Tuple[RegionConfig, ...] = (
    RegionConfig(
        code="MX",
        name="México",
        requires_identifier=True,
        identifier_label="RFC",
        identifier_pattern=re.compile(r"^[A-ZÑ&]{3,4}\d{6}[A-Z0-9]{3}$"),
        identifier_placeholder="ABC123456DEF",
        identifier_min_length=12,
        identifier_max_length=13,
        phone_pattern=re.compile(r"^[0-9]{10}$"),
        phone_placeholder="5512345678",
        phone_min_length=10,
        phone_max_length=10,
        aliases=("Mexico", "MX", "Distrito Federal"),
        sub_regions=(
            SubRegion("MX_COATZACOALCOS", "Coatzacoalcos", ("Coatza",)),
            SubRegion("MX_MINATITLAN", "Minatitlán"),
            SubRegion("MX_AGUASCALIENTES", "Aguascalientes"),
            SubRegion("MX_GUERRERO", "Guerrero", ("Acapulco", "Chilpancingo")),
            SubRegion("MX_LAZARO_CARDENAS", "Lázaro Cárdenas"),
            SubRegion(
                "MX_CDMX",
                "CDMX",
                ("Ciudad de México", "México D.F.", "Mexico DF", "Distrito Federal"),
            ),
        ),
    ),
    RegionConfig(
        code="HN",
        name="Honduras",
        requires_identifier=False,
        identifier_label="RTN (Opcional)",
        identifier_placeholder="12345678901234",
        identifier_min_length=14,
        identifier_max_length=14,
        phone_pattern=re.compile(r"^[0-9]{8}$"),
        phone_placeholder="98765432",
        phone_min_length=8,
        phone_max_length=8,
        aliases=("Tegucigalpa", "San Pedro Sula", "La Ceiba", "Comayagua"),
    ),
    RegionConfig(
        code="SV",
        name="El Salvador",
        requires_identifier=False,
        identifier_label="NIT (Opcional)",
        identifier_placeholder="12345678901234",
        identifier_min_length=14,
        identifier_max_length=14,
        phone_pattern=re.compile(r"^[0-9]{8}$"),
        phone_placeholder="98765432",
        phone_min_length=8,
        phone_max_length=8,
        aliases=("Salvador", "San Salvador", "Santa Ana", "San Miguel"),
    ),
    RegionConfig(
        code="BZ",
        name="Belize",
        requires_identifier=False,
        identifier_label="Tax ID (Opcional)",
        identifier_placeholder="123456789",
        identifier_min_length=9,
        identifier_max_length=9,
        phone_pattern=re.compile(r"^[0-9]{7}$"),
        phone_placeholder="1234567",
        phone_min_length=7,
        phone_max_length=7,
        aliases=("Belice", "Belmopan", "Belize City"),
    ),
)

REGIONS: Dict[str, RegionConfig] = {r.code: r for r in _REGIONS}


def find_region(region_code: Optional[str]) -> Optional[RegionConfig]:
    """Return the RegionConfig for a code, or None if the code is empty/unknown."""
    if not region_code:
        return None
    return REGIONS.get(region_code.strip().upper())


def get_region(region_code: Optional[str]) -> RegionConfig:
    """Return the RegionConfig for a code. Raises UnknownRegion when absent."""
    region = find_region(region_code)
    if region is None:
        raise UnknownRegion(region_code or "")
    return region


def all_regions() -> Tuple[RegionConfig, ...]:
    return _REGIONS


def region_codes() -> Tuple[str, ...]:
    return tuple(REGIONS)


def region_for_sub_region(sub_region_code: Optional[str]) -> Optional[RegionConfig]:
    """Sub-region codes are prefixed with their region code (MX_CDMX -> MX)."""
    if not sub_region_code or "_" not in sub_region_code:
        return None
    return find_region(sub_region_code.split("_", 1)[0])


def sub_region_name(sub_region_code: Optional[str]) -> Optional[str]:
    """Display name for a sub-region code; unknown codes are returned unchanged."""
    if not sub_region_code:
        return None
    for region in _REGIONS:
        sub = region.find_sub_region(sub_region_code)
        if sub:
            return sub.name
    return sub_region_code
