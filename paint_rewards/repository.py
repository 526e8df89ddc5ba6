"""
paint_rewards/repository.py

Persistence collaborator used by the blueprints.

Rules:
- Functions ADD/UPDATE rows in the current session and flush; the calling
  route owns commit/rollback.
- No retry: storage errors propagate unchanged to the caller.
- Review fields and status are only ever written through patches produced by
  core/lifecycle.py.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload, selectinload

from .core.lifecycle import ProjectStatus
from .extensions import db
from .models import Contractor, Project, Validator

logger = logging.getLogger(__name__)

PROJECT_FIELDS = ("name", "location", "area", "material", "liters", "description")
CONTRACTOR_PROFILE_FIELDS = ("name", "email", "phone")


class RepositoryError(Exception):
    """Base class for persistence collaborator failures."""


class NotFound(RepositoryError):
    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key!r} not found")


class DuplicateIdentity(RepositoryError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email {email!r} is already registered")


def _apply_patch(instance: Any, patch: Mapping[str, Any], allowed: Optional[Iterable[str]] = None) -> None:
    allowed_set = set(allowed) if allowed is not None else None
    for key, value in patch.items():
        if allowed_set is not None and key not in allowed_set:
            continue
        if not hasattr(instance, key):
            raise AttributeError(f"{instance.__class__.__name__} has no field {key!r}")
        setattr(instance, key, value)


# ---------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------
def create_project(contractor_id: int, record: Mapping[str, Any]) -> Project:
    """Insert a new submission. Status always starts as pending."""
    project = Project(contractor_id=contractor_id, status=ProjectStatus.PENDING.value)
    _apply_patch(project, record, allowed=PROJECT_FIELDS)
    db.session.add(project)
    db.session.flush()
    logger.info("Project %s created by contractor %s", project.id, contractor_id)
    return project


def get_project(project_id: int) -> Project:
    project = db.session.get(Project, project_id)
    if project is None:
        raise NotFound("Project", project_id)
    return project


def update_project(project_id: Union[int, Project], patch: Mapping[str, Any]) -> Project:
    """Single-record update; last writer wins."""
    project = project_id if isinstance(project_id, Project) else get_project(project_id)
    _apply_patch(project, patch)
    db.session.flush()
    return project


def list_projects_by_contractor(contractor_id: int) -> List[Project]:
    return (
        Project.query.filter_by(contractor_id=contractor_id)
        .options(selectinload(Project.images))
        .order_by(Project.created_at.desc(), Project.id.desc())
        .all()
    )


def list_all_projects(
    region_filter: Optional[str] = None,
    sub_region_filter: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Project]:
    """
    All projects joined with their contractor, optionally restricted to the
    contractor's region/sub-region and to a status.

    Filtering on ``pending`` also returns ``reviewing`` rows (display alias).
    """
    q = Project.query.join(Contractor, Contractor.id == Project.contractor_id)

    if region_filter:
        q = q.filter(Contractor.region_code == region_filter)
    if sub_region_filter:
        q = q.filter(Contractor.sub_region_code == sub_region_filter)

    if status:
        if status == ProjectStatus.PENDING.value:
            q = q.filter(Project.status.in_([ProjectStatus.PENDING.value, ProjectStatus.REVIEWING.value]))
        else:
            q = q.filter(Project.status == status)

    return (
        q.options(joinedload(Project.contractor), selectinload(Project.images))
        .order_by(Project.created_at.desc(), Project.id.desc())
        .all()
    )


# ---------------------------------------------------------------------
# Contractors
# ---------------------------------------------------------------------
def get_contractor(id_or_email: Union[int, str]) -> Contractor:
    if isinstance(id_or_email, int):
        contractor = db.session.get(Contractor, id_or_email)
    else:
        contractor = Contractor.query.filter_by(email=str(id_or_email).strip().lower()).first()
    if contractor is None:
        raise NotFound("Contractor", id_or_email)
    return contractor


def _email_taken(email: str, exclude_id: Optional[int] = None) -> bool:
    q = Contractor.query.filter_by(email=email)
    if exclude_id is not None:
        q = q.filter(Contractor.id != exclude_id)
    return db.session.query(q.exists()).scalar()


def create_contractor(record: Mapping[str, Any]) -> Contractor:
    """
    Insert a contractor from a validated registration record.

    The record carries the plain password; it is hashed here.
    """
    email = record["email"]
    if _email_taken(email):
        raise DuplicateIdentity(email)

    contractor = Contractor(
        name=record["name"],
        email=email,
        phone=record["phone"],
        identifier=record.get("identifier"),
        region_code=record.get("region_code"),
        sub_region_code=record.get("sub_region_code"),
    )
    contractor.set_password(record["password"])

    db.session.add(contractor)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateIdentity(email)

    logger.info("Contractor %s registered in region %s", contractor.id, contractor.region_code)
    return contractor


def update_contractor(contractor_id: Union[int, Contractor], patch: Mapping[str, Any]) -> Contractor:
    """Profile edit: only name/email/phone may change."""
    contractor = contractor_id if isinstance(contractor_id, Contractor) else get_contractor(contractor_id)

    email = patch.get("email")
    if email and email != contractor.email and _email_taken(email, exclude_id=contractor.id):
        raise DuplicateIdentity(email)

    _apply_patch(contractor, patch, allowed=CONTRACTOR_PROFILE_FIELDS)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateIdentity(email or contractor.email)
    return contractor


# ---------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------
def get_validator(id_or_email: Union[int, str]) -> Validator:
    if isinstance(id_or_email, int):
        validator = db.session.get(Validator, id_or_email)
    else:
        validator = Validator.query.filter_by(email=str(id_or_email).strip().lower()).first()
    if validator is None:
        raise NotFound("Validator", id_or_email)
    return validator


def create_validator(
    email: str,
    name: str,
    password: str,
    region_code: Optional[str] = None,
    sub_region_code: Optional[str] = None,
) -> Validator:
    email = email.strip().lower()
    if Validator.query.filter_by(email=email).first():
        raise DuplicateIdentity(email)

    validator = Validator(
        email=email,
        name=name,
        region_code=region_code or None,
        sub_region_code=sub_region_code or None,
        is_active=True,
    )
    validator.set_password(password)
    db.session.add(validator)
    db.session.flush()
    return validator
