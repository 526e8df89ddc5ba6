"""
paint_rewards/core/errors.py

Typed error taxonomy for the submission/review core.

Every error carries a machine-readable ``code`` so the presentation layer can
map it to a translated message without parsing text.

    PaintRewardsError
    |
    +-- UnknownRegion
    +-- UnknownMaterial
    +-- LifecycleError
        +-- LifecycleViolation
        +-- MissingRejectionReason
        +-- MissingConfirmation
        +-- MissingValidator

FieldValidationError is NOT an exception: field problems are collected and
returned together (see core/submission.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


class PaintRewardsError(Exception):
    """Base class for all core errors."""

    code: str = "PAINT_REWARDS_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


class UnknownRegion(PaintRewardsError):
    """Region code not present in the catalog (configuration inconsistency)."""

    code = "UNKNOWN_REGION"

    def __init__(self, region_code: str):
        self.region_code = region_code
        super().__init__(f"Unknown region: {region_code!r}")


class UnknownMaterial(PaintRewardsError):
    code = "UNKNOWN_MATERIAL"

    def __init__(self, material: str):
        self.material = material
        super().__init__(f"Unknown paint material: {material!r}")


# ---------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------
class LifecycleError(PaintRewardsError):
    """A review transition was refused before any persistence call."""

    code = "LIFECYCLE_ERROR"


class LifecycleViolation(LifecycleError):
    code = "LIFECYCLE_VIOLATION"

    def __init__(self, from_status: str, attempted: str):
        self.from_status = from_status
        self.attempted = attempted
        super().__init__(f"Transition {from_status} -> {attempted} is not allowed")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"from": self.from_status, "attempted": self.attempted})
        return data


class MissingRejectionReason(LifecycleError):
    code = "MISSING_REJECTION_REASON"

    def __init__(self):
        super().__init__("Rejection requires notes explaining the reason")


class MissingConfirmation(LifecycleError):
    code = "MISSING_CONFIRMATION"

    def __init__(self):
        super().__init__("Validation requires the physical verification acknowledgement")


class MissingValidator(LifecycleError):
    code = "MISSING_VALIDATOR"

    def __init__(self):
        super().__init__("An authenticated validator is required for review actions")


# ---------------------------------------------------------------------
# Field-level validation (collected, never raised)
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class FieldValidationError:
    field: str
    reason: str
    expected: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"field": self.field, "reason": self.reason}
        if self.expected is not None:
            data["expected"] = list(self.expected) if isinstance(self.expected, tuple) else self.expected
        return data
