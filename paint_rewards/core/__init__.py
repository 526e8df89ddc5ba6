"""
paint_rewards/core

Submission validation and review-lifecycle engine.

Pure Python: no Flask or database imports. The application package feeds it
plain values and persists the results.
"""

from __future__ import annotations

from .context import RequestContext  # noqa: F401
from .errors import (  # noqa: F401
    FieldValidationError,
    LifecycleError,
    LifecycleViolation,
    MissingConfirmation,
    MissingRejectionReason,
    MissingValidator,
    PaintRewardsError,
    UnknownMaterial,
    UnknownRegion,
)
from .lifecycle import ProjectStatus  # noqa: F401
from .location import LocationReason, LocationResult, validate_location  # noqa: F401
from .paint_yield import PAINT_MATERIALS, calculate_liters  # noqa: F401
from .regions import RegionConfig, SubRegion, find_region, get_region  # noqa: F401
from .submission import (  # noqa: F401
    SubmissionResult,
    validate_contractor_profile,
    validate_contractor_registration,
    validate_project_submission,
)
