"""
paint_rewards/core/location.py

Free-text work location check, scoped by the contractor's region.

Matching is substring containment on normalized text (lower-case, accents
removed). It is loose on purpose: addresses are typed by hand or pasted from
an autocomplete widget, so no tokenization is attempted. The first synonym
that matches wins.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

from .regions import RegionConfig, find_region

logger = logging.getLogger(__name__)

MIN_LOCATION_LENGTH = 5


class LocationReason(str, Enum):
    TOO_SHORT = "too_short"
    WRONG_REGION = "wrong_region"
    WRONG_SUB_REGION = "wrong_sub_region"
    WRONG_REGION_CITIES = "wrong_region_cities"


@dataclass(frozen=True)
class LocationResult:
    valid: bool
    reason: Optional[LocationReason] = None
    expected: Optional[Union[str, Tuple[str, ...]]] = None

    @classmethod
    def ok(cls) -> "LocationResult":
        return cls(valid=True)

    @classmethod
    def invalid(cls, reason: LocationReason, expected=None) -> "LocationResult":
        return cls(valid=False, reason=reason, expected=expected)


def normalize_text(value: Optional[str]) -> str:
    """Lower-case, strip diacritics and collapse whitespace."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return re.sub(r"\s+", " ", stripped).strip().lower()


def _contains_any(haystack: str, synonyms: Iterable[str]) -> bool:
    return any(normalize_text(name) in haystack for name in synonyms)


def _matches_region(region: RegionConfig, normalized: str) -> bool:
    return _contains_any(normalized, region.synonyms)


def validate_location(
    location: Optional[str],
    region_code: Optional[str],
    sub_region_code: Optional[str] = None,
) -> LocationResult:
    """
    Validate a location string against the contractor's region/sub-region.

    Contractors registered before region capture existed have no region code,
    or a stored code that is no longer in the catalog. Their locations are
    accepted unchecked (only the length rule applies).
    """
    raw = (location or "").strip()
    if len(raw) < MIN_LOCATION_LENGTH:
        return LocationResult.invalid(LocationReason.TOO_SHORT, MIN_LOCATION_LENGTH)

    normalized = normalize_text(raw)

    region = find_region(region_code)
    if region is None:
        if region_code:
            logger.warning("Region %r is not in the catalog; location accepted unscoped", region_code)
        else:
            logger.debug("Unscoped location accepted for contractor without region: %r", raw)
        return LocationResult.ok()

    if region.has_sub_regions:
        assigned = region.find_sub_region(sub_region_code)
        if sub_region_code and assigned is None:
            logger.warning(
                "Sub-region %r does not belong to region %s; checking against all sub-regions",
                sub_region_code,
                region.code,
            )

        if assigned is not None:
            if not _contains_any(normalized, assigned.synonyms):
                return LocationResult.invalid(LocationReason.WRONG_SUB_REGION, assigned.name)
        else:
            if not any(_contains_any(normalized, sub.synonyms) for sub in region.sub_regions):
                return LocationResult.invalid(
                    LocationReason.WRONG_REGION_CITIES,
                    tuple(sub.name for sub in region.sub_regions),
                )

    if not _matches_region(region, normalized):
        return LocationResult.invalid(LocationReason.WRONG_REGION, region.name)

    return LocationResult.ok()
