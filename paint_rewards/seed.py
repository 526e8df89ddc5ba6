"""
paint_rewards/seed.py

Bootstrap validator accounts.

Rules:
- Safe to run multiple times (idempotent): an existing validator (matched by
  email) is updated in place, never duplicated.
- Region and sub-region are checked against the region catalog before any
  row is written. A sub-region alone implies its region (MX_CDMX -> MX).

NOTE:
- Contractors are not seeded here; they register themselves.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from .core.regions import get_region, region_for_sub_region
from .extensions import db
from .models import Validator
from .repository import create_validator

logger = logging.getLogger(__name__)


def _check_scope(region_code: Optional[str], sub_region_code: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    region_code = (region_code or "").strip().upper() or None
    sub_region_code = (sub_region_code or "").strip().upper() or None

    if region_code is None:
        if not sub_region_code:
            return None, None
        inferred = region_for_sub_region(sub_region_code)
        if inferred is None:
            raise ValueError(f"Cannot infer a region from sub-region {sub_region_code}.")
        region_code = inferred.code

    region = get_region(region_code)
    if sub_region_code and region.find_sub_region(sub_region_code) is None:
        raise ValueError(f"Sub-region {sub_region_code} does not belong to {region.code}.")
    return region.code, sub_region_code


def seed_validator(
    email: str,
    name: str,
    password: str,
    region_code: Optional[str] = None,
    sub_region_code: Optional[str] = None,
) -> Tuple[Validator, bool]:
    """
    Create or update a validator account.

    Returns (validator, created).
    """
    region_code, sub_region_code = _check_scope(region_code, sub_region_code)
    email = email.strip().lower()

    existing = Validator.query.filter_by(email=email).first()
    if existing:
        existing.name = name
        existing.region_code = region_code
        existing.sub_region_code = sub_region_code
        existing.is_active = True
        existing.set_password(password)
        db.session.commit()
        logger.info("Validator %s updated (region=%s)", email, region_code)
        return existing, False

    validator = create_validator(email, name, password, region_code, sub_region_code)
    db.session.commit()
    logger.info("Validator %s created (region=%s)", email, region_code)
    return validator, True
