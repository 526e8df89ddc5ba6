"""
paint_rewards/core/raffles.py

Monthly raffle per region. Regions without an entry fall back to MX.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional


@dataclass(frozen=True)
class RafflePrize:
    title: str
    description: str
    value: str
    image: str = "/professional-painting-tools.jpg"


@dataclass(frozen=True)
class RaffleConfig:
    region_code: str
    month: str
    prize: RafflePrize
    draw_date: date

    def to_dict(self) -> dict:
        return {
            "region_code": self.region_code,
            "month": self.month,
            "draw_date": self.draw_date.isoformat(),
            "prize": {
                "title": self.prize.title,
                "description": self.prize.description,
                "value": self.prize.value,
                "image": self.prize.image,
            },
        }


DEFAULT_RAFFLE_REGION = "MX"

RAFFLES: Dict[str, RaffleConfig] = {
    "MX": RaffleConfig(
        region_code="MX",
        month="Enero 2025",
        prize=RafflePrize(
            title="Kit de Herramientas Profesionales",
            description="Incluye pistola de pintura profesional, rodillos premium, brochas de alta calidad y accesorios",
            value="$15,000 MXN",
        ),
        draw_date=date(2025, 1, 31),
    ),
    "HN": RaffleConfig(
        region_code="HN",
        month="Enero 2025",
        prize=RafflePrize(
            title="Kit Completo de Pintura Profesional",
            description="Pistola de pintura, rodillos de alta calidad, brochas profesionales y todos los accesorios necesarios",
            value="L. 3,500 HNL",
        ),
        draw_date=date(2025, 1, 31),
    ),
    "SV": RaffleConfig(
        region_code="SV",
        month="Enero 2025",
        prize=RafflePrize(
            title="Equipo Profesional de Pintura",
            description="Kit completo con pistola de pintura profesional, rodillos premium y herramientas de alta calidad",
            value="$400 USD",
        ),
        draw_date=date(2025, 1, 31),
    ),
    "BZ": RaffleConfig(
        region_code="BZ",
        month="January 2025",
        prize=RafflePrize(
            title="Professional Painting Tools Kit",
            description="Includes professional paint sprayer, premium rollers, high-quality brushes and accessories",
            value="$400 BZD",
        ),
        draw_date=date(2025, 1, 31),
    ),
}


def get_raffle(region_code: Optional[str]) -> RaffleConfig:
    if not region_code or region_code not in RAFFLES:
        return RAFFLES[DEFAULT_RAFFLE_REGION]
    return RAFFLES[region_code]
