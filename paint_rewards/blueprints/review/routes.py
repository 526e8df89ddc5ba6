"""
paint_rewards/blueprints/review/routes.py

Validator routes: review queue, decisions and counters.

Rules:
- A validator with a region only ever sees projects of contractors in that
  region (and sub-region, when assigned). Query filters cannot widen the scope.
- Validation requires the physical-check acknowledgement; rejection requires
  notes. Both are refused before anything is written.
- Ticket and participant counts are recomputed from the project set on every
  request.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from flask import Blueprint, jsonify, request
from flask_login import current_user

from ...audit import log_action, serialize_model
from ...core import lifecycle
from ...core.context import RequestContext
from ...core.eligibility import participant_count, status_counts, ticket_count
from ...core.errors import FieldValidationError
from ...core.lifecycle import ProjectStatus
from ...core.regions import all_regions, find_region
from ...extensions import db
from ...repository import get_project, list_all_projects, update_project
from ...security import build_request_context, project_review_access_required, validator_required
from ...utils import field_errors_response, parse_bool, request_payload

logger = logging.getLogger(__name__)

review_bp = Blueprint("review", __name__, url_prefix="/review")

STATUS_FILTERS = tuple(s.value for s in ProjectStatus)


def _load_reviewable_project(project_id: int, **_):
    return get_project(project_id)


def _scope_filters(ctx: RequestContext) -> Tuple[Optional[str], Optional[str]]:
    """
    Region filters for the current validator.

    Scoped validators always get their own scope; unscoped validators may
    narrow the list with ?region= and ?sub_region=.
    """
    if ctx.is_region_scoped:
        return ctx.region_code, ctx.sub_region_code
    region = (request.args.get("region") or "").strip().upper() or None
    sub_region = (request.args.get("sub_region") or "").strip().upper() or None
    return region, sub_region


# ---------------------------------------------------------------------
# Queue
# ---------------------------------------------------------------------
@review_bp.route("/projects", methods=["GET"])
@validator_required
def list_projects():
    status = (request.args.get("status") or "").strip().lower() or None
    if status and status not in STATUS_FILTERS:
        return field_errors_response([FieldValidationError("status", "invalid_format", STATUS_FILTERS)])

    region_filter, sub_region_filter = _scope_filters(build_request_context())
    projects = list_all_projects(region_filter, sub_region_filter, status=status)

    return jsonify(
        {
            "projects": [p.to_dict(include_contractor=True) for p in projects],
            "count": len(projects),
            "filters": {"region": region_filter, "sub_region": sub_region_filter, "status": status},
        }
    )


@review_bp.route("/projects/<int:project_id>", methods=["GET"])
@project_review_access_required(_load_reviewable_project)
def project_detail(project_id: int):
    project = get_project(project_id)
    allowed = [
        target.value
        for target in (ProjectStatus.VALIDATED, ProjectStatus.REJECTED)
        if lifecycle.can_transition(project.status, target)[0]
    ]
    return jsonify({"project": project.to_dict(include_contractor=True), "allowed_actions": allowed})


# ---------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------
@review_bp.route("/projects/<int:project_id>/validate", methods=["POST"])
@project_review_access_required(_load_reviewable_project)
def validate_project(project_id: int):
    """
    pending -> validated.

    Body:
    - physical_check_confirmed: must be true
    - notes: optional (a default note is stored when empty)
    """
    project = get_project(project_id)
    form = request_payload()

    patch = lifecycle.validate(
        project.status,
        validator_id=current_user.id,
        physical_check_confirmed=parse_bool(form.get("physical_check_confirmed")),
        notes=form.get("notes"),
    )

    before = serialize_model(project)
    update_project(project, patch)
    log_action(project, "VALIDATE", before=before, after=serialize_model(project))
    db.session.commit()

    logger.info("Project %s validated by validator %s", project.id, current_user.id)
    return jsonify({"project": project.to_dict(include_contractor=True)})


@review_bp.route("/projects/<int:project_id>/reject", methods=["POST"])
@project_review_access_required(_load_reviewable_project)
def reject_project(project_id: int):
    """pending -> rejected. Body: notes (required)."""
    project = get_project(project_id)
    form = request_payload()

    patch = lifecycle.reject(project.status, validator_id=current_user.id, notes=form.get("notes"))

    before = serialize_model(project)
    update_project(project, patch)
    log_action(project, "REJECT", before=before, after=serialize_model(project))
    db.session.commit()

    logger.info("Project %s rejected by validator %s", project.id, current_user.id)
    return jsonify({"project": project.to_dict(include_contractor=True)})


# ---------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------
@review_bp.route("/stats", methods=["GET"])
@validator_required
def stats():
    """Status counters, tickets and raffle participants for the validator's scope."""
    region_filter, sub_region_filter = _scope_filters(build_request_context())
    projects = list_all_projects(region_filter, sub_region_filter)

    regions = [find_region(region_filter)] if region_filter else list(all_regions())
    by_region = {
        region.code: participant_count(projects, region.code)
        for region in regions
        if region is not None
    }

    return jsonify(
        {
            "status_counts": status_counts(projects),
            "tickets": ticket_count(projects),
            "participants": participant_count(projects),
            "participants_by_region": by_region,
            "filters": {"region": region_filter, "sub_region": sub_region_filter},
        }
    )
