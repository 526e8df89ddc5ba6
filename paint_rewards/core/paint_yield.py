"""
paint_rewards/core/paint_yield.py

Paint quantity suggestion from painted area and material.

liters = ceil(area / yield_per_liter[material])

The value is only a suggestion: the contractor may type any positive integer
instead, and the calculator never rejects a manual value.
"""

from __future__ import annotations

import math
from collections import OrderedDict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Union

from .errors import UnknownMaterial

INTERIOR = "Interior"
EXTERIOR = "Exterior"


@dataclass(frozen=True)
class PaintMaterial:
    key: str
    name: str
    yield_per_liter: int  # m² per liter
    category: str

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "yield_per_liter": self.yield_per_liter,
            "category": self.category,
        }


PAINT_MATERIALS: Dict[str, PaintMaterial] = OrderedDict(
    (m.key, m)
    for m in (
        PaintMaterial("vinimex", "Vinimex", 12, INTERIOR),
        PaintMaterial("pro-mil", "Pro-mil", 10, INTERIOR),
        PaintMaterial("prima", "Prima", 8, INTERIOR),
        PaintMaterial("cam-vinimex", "CAM Vinimex", 10, EXTERIOR),
        PaintMaterial("acrimate", "Acrimate", 12, EXTERIOR),
    )
)


def get_material(key: str) -> PaintMaterial:
    material = PAINT_MATERIALS.get((key or "").strip().lower())
    if material is None:
        raise UnknownMaterial(key)
    return material


def calculate_liters(area: Union[Decimal, int, float, str], material: Optional[str]) -> Optional[int]:
    """
    Suggested liters for ``area`` m² of ``material``.

    Returns None when no material is selected.
    Raises UnknownMaterial for keys outside the table and ValueError for a
    non-positive area.
    """
    if not material:
        return None

    paint = get_material(material)
    area_dec = Decimal(str(area))
    if area_dec <= 0:
        raise ValueError("area must be positive")

    return int(math.ceil(area_dec / Decimal(paint.yield_per_liter)))


def materials_by_category() -> Dict[str, List[PaintMaterial]]:
    grouped: Dict[str, List[PaintMaterial]] = OrderedDict()
    for material in PAINT_MATERIALS.values():
        grouped.setdefault(material.category, []).append(material)
    return grouped
