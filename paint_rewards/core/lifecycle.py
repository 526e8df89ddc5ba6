"""
paint_rewards/core/lifecycle.py

Review state machine for projects.

    pending --validate--> validated   (terminal)
    pending --reject----> rejected
    rejected --resubmit-> pending

"reviewing" exists in stored data but has no transitions of its own: it is a
display alias of "pending".

Every function here checks its preconditions and returns a patch dict for the
persistence collaborator. Nothing is written when a check fails.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import (
    LifecycleViolation,
    MissingConfirmation,
    MissingRejectionReason,
    MissingValidator,
)

DEFAULT_VALIDATION_NOTE = "Proyecto validado tras verificación física."


class ProjectStatus(str, Enum):
    PENDING = "pending"
    REVIEWING = "reviewing"
    VALIDATED = "validated"
    REJECTED = "rejected"


StatusLike = Union[ProjectStatus, str, None]


STATE_CONFIG: Dict[ProjectStatus, Dict[str, Any]] = {
    ProjectStatus.PENDING: {
        "allowed_transitions": (ProjectStatus.VALIDATED, ProjectStatus.REJECTED),
    },
    ProjectStatus.VALIDATED: {
        "allowed_transitions": (),  # Terminal state; counts as one raffle ticket
    },
    ProjectStatus.REJECTED: {
        "allowed_transitions": (ProjectStatus.PENDING,),
    },
}

# Fields written by a review and cleared by a resubmission
REVIEW_FIELDS = ("validator_id", "validation_notes", "validation_date")


def coerce_status(status: StatusLike) -> ProjectStatus:
    """Parse a stored status value. Missing values are treated as pending."""
    if status is None or status == "":
        return ProjectStatus.PENDING
    if isinstance(status, ProjectStatus):
        return status
    return ProjectStatus(str(status).strip().lower())


def effective_status(status: StatusLike) -> ProjectStatus:
    """Collapse display-only aliases onto the state that owns the transitions."""
    current = coerce_status(status)
    if current is ProjectStatus.REVIEWING:
        return ProjectStatus.PENDING
    return current


def can_transition(from_status: StatusLike, to_status: StatusLike) -> Tuple[bool, str]:
    """
    Check if a transition is allowed.

    Returns (allowed, reason)
    """
    source = effective_status(from_status)
    target = effective_status(to_status)
    allowed = STATE_CONFIG[source]["allowed_transitions"]

    if target in allowed:
        return True, f"{source.value} -> {target.value} allowed"
    if not allowed:
        return False, f"{source.value} is a terminal state"
    return False, f"{source.value} -> {target.value} not allowed; expected one of {[s.value for s in allowed]}"


def ensure_transition(from_status: StatusLike, to_status: StatusLike) -> None:
    allowed, _ = can_transition(from_status, to_status)
    if not allowed:
        raise LifecycleViolation(coerce_status(from_status).value, coerce_status(to_status).value)


def is_terminal(status: StatusLike) -> bool:
    return not STATE_CONFIG[effective_status(status)]["allowed_transitions"]


def can_edit_images(status: StatusLike) -> bool:
    """Evidence can be added/removed until the project is validated."""
    return not is_terminal(status)


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.utcnow()


def _clean_notes(notes: Any) -> str:
    return "" if notes is None else str(notes).strip()


# ---------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------
def validate(
    status: StatusLike,
    *,
    validator_id: Optional[Any],
    physical_check_confirmed: bool,
    notes: Any = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """pending -> validated. Requires the physical verification acknowledgement."""
    ensure_transition(status, ProjectStatus.VALIDATED)
    if not validator_id:
        raise MissingValidator()
    if not physical_check_confirmed:
        raise MissingConfirmation()

    return {
        "status": ProjectStatus.VALIDATED.value,
        "validator_id": validator_id,
        "validation_notes": _clean_notes(notes) or DEFAULT_VALIDATION_NOTE,
        "validation_date": _now(now),
    }


def reject(
    status: StatusLike,
    *,
    validator_id: Optional[Any],
    notes: Any,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """pending -> rejected. Notes are mandatory."""
    ensure_transition(status, ProjectStatus.REJECTED)
    if not validator_id:
        raise MissingValidator()
    cleaned = _clean_notes(notes)
    if not cleaned:
        raise MissingRejectionReason()

    return {
        "status": ProjectStatus.REJECTED.value,
        "validator_id": validator_id,
        "validation_notes": cleaned,
        "validation_date": _now(now),
    }


def resubmit(status: StatusLike, *, changes: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    rejected -> pending, triggered by the owning contractor.

    ``changes`` are the contractor's corrected fields (already validated).
    Review fields are cleared; images are left to the caller.
    """
    ensure_transition(status, ProjectStatus.PENDING)

    patch: Dict[str, Any] = dict(changes or {})
    for name in ("status",) + REVIEW_FIELDS:
        patch.pop(name, None)

    patch["status"] = ProjectStatus.PENDING.value
    for name in REVIEW_FIELDS:
        patch[name] = None
    return patch
