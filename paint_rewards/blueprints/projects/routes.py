"""
paint_rewards/blueprints/projects/routes.py

Contractor-facing project routes.

Source of truth:
- Field rules: core/submission.py
- Review states: core/lifecycle.py
- Ticket counting: core/eligibility.py

Routes:
- /projects/                                  list own projects | submit a new one
- /projects/<id>                              project detail
- /projects/<id>/resubmit                     fix and resubmit a rejected project
- /projects/<id>/images                       add evidence photos
- /projects/<id>/images/<image_id>/delete     remove one photo
- /projects/estimate                          liters suggestion for area + material
- /projects/materials                         paint materials grouped by category
- /projects/raffle                            tickets + current regional raffle

IMPORTANT:
- Contractors only see their own projects (project_owner_required).
- Validated projects are final; their evidence can no longer change.
- Image upload is best-effort: failed files come back as warnings and never
  undo the project write.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from ...audit import log_action, serialize_model
from ...core import lifecycle
from ...core.errors import FieldValidationError
from ...core.eligibility import raffle_summary
from ...core.lifecycle import ProjectStatus, can_edit_images
from ...core.paint_yield import calculate_liters, get_material, materials_by_category
from ...core.raffles import get_raffle
from ...core.submission import parse_decimal, validate_project_submission
from ...extensions import db
from ...images import ImageUploadResult, delete_project_image, upload_project_images
from ...models import ProjectImage
from ...repository import PROJECT_FIELDS, create_project, get_project, list_projects_by_contractor, update_project
from ...security import build_request_context, contractor_required, project_owner_required
from ...utils import field_errors_response, json_error, request_payload

logger = logging.getLogger(__name__)

projects_bp = Blueprint("projects", __name__, url_prefix="/projects")


def _load_owned_project(project_id: int, **_):
    return get_project(project_id)


def _uploaded_files() -> List[Any]:
    return [f for f in request.files.getlist("images") if f and f.filename]


def _image_payload(results: List[ImageUploadResult]) -> Dict[str, Any]:
    return {
        "uploads": [r.to_dict() for r in results],
        "warnings": [f"{r.filename}: {r.error}" for r in results if not r.ok],
    }


def _images_locked(project):
    return json_error(
        "IMAGES_LOCKED",
        "Las fotos de un proyecto validado no se pueden modificar.",
        409,
        project_status=project.status,
    )


def _merged_form(project, form: Dict[str, Any]) -> Dict[str, Any]:
    """Current project values overridden by the submitted ones."""
    merged: Dict[str, Any] = {
        "name": project.name,
        "location": project.location,
        "area": project.area,
        "material": project.material,
        "liters": project.liters,
        "description": project.description,
    }
    for key in PROJECT_FIELDS:
        if key in form:
            merged[key] = form[key]
    return merged


# ---------------------------------------------------------------------
# List / create
# ---------------------------------------------------------------------
@projects_bp.route("/", methods=["GET"])
@contractor_required
def list_projects():
    projects = list_projects_by_contractor(current_user.id)
    summary = raffle_summary(projects)
    return jsonify(
        {
            "projects": [p.to_dict() for p in projects],
            "tickets": summary["tickets"],
            "awaiting": len(summary["awaiting_projects"]),
            "rejected": summary["rejected_count"],
        }
    )


@projects_bp.route("/", methods=["POST"])
@contractor_required
def create_project_view():
    """
    Submit a new project (JSON or multipart with `images` files).

    Logic:
    - Location must match the contractor's region/sub-region
    - Liters may be left blank when a material is chosen (yield suggestion)
    - The project always starts as pending
    """
    ctx = build_request_context()
    form = request_payload()

    result = validate_project_submission(form, ctx.region_code, ctx.sub_region_code)
    if not result.accepted:
        return field_errors_response(result.errors, form)

    project = create_project(ctx.actor_id, result.record)
    log_action(project, "CREATE", after=serialize_model(project))

    uploads = upload_project_images(project, _uploaded_files())
    db.session.commit()

    body = {"project": project.to_dict(), "liters_estimated": result.record["liters_estimated"]}
    body.update(_image_payload(uploads))
    return jsonify(body), 201


# ---------------------------------------------------------------------
# Detail / resubmit
# ---------------------------------------------------------------------
@projects_bp.route("/<int:project_id>", methods=["GET"])
@project_owner_required(_load_owned_project)
def project_detail(project_id: int):
    project = get_project(project_id)
    return jsonify({"project": project.to_dict()})


@projects_bp.route("/<int:project_id>/resubmit", methods=["POST"])
@project_owner_required(_load_owned_project)
def resubmit_project(project_id: int):
    """
    Correct a rejected project and send it back to the review queue.

    Logic:
    - Only rejected projects can be resubmitted (409 otherwise)
    - Fields not sent keep their current value; the merged form is validated
      with the same rules as a new submission
    - Review fields are cleared; status returns to pending
    """
    ctx = build_request_context()
    project = get_project(project_id)
    lifecycle.ensure_transition(project.status, ProjectStatus.PENDING)

    form = request_payload()
    result = validate_project_submission(_merged_form(project, form), ctx.region_code, ctx.sub_region_code)
    if not result.accepted:
        return field_errors_response(result.errors, form)

    changes = {k: v for k, v in result.record.items() if k in PROJECT_FIELDS}
    patch = lifecycle.resubmit(project.status, changes=changes)

    before = serialize_model(project)
    update_project(project, patch)
    log_action(project, "RESUBMIT", before=before, after=serialize_model(project))

    uploads = upload_project_images(project, _uploaded_files())
    db.session.commit()

    logger.info("Project %s resubmitted by contractor %s", project.id, ctx.actor_id)
    body = {"project": project.to_dict()}
    body.update(_image_payload(uploads))
    return jsonify(body)


# ---------------------------------------------------------------------
# Evidence images
# ---------------------------------------------------------------------
@projects_bp.route("/<int:project_id>/images", methods=["POST"])
@project_owner_required(_load_owned_project)
def add_images(project_id: int):
    project = get_project(project_id)
    if not can_edit_images(project.status):
        return _images_locked(project)

    files = _uploaded_files()
    if not files:
        return field_errors_response([FieldValidationError("images", "required")])

    uploads = upload_project_images(project, files)
    stored = [r.image_id for r in uploads if r.ok]
    if stored:
        log_action(project, "UPDATE", after={"images_added": stored})
    db.session.commit()

    body = {"project": project.to_dict()}
    body.update(_image_payload(uploads))
    return jsonify(body), 201 if stored else 400


@projects_bp.route("/<int:project_id>/images/<int:image_id>/delete", methods=["POST"])
@project_owner_required(_load_owned_project)
def delete_image(project_id: int, image_id: int):
    project = get_project(project_id)
    if not can_edit_images(project.status):
        return _images_locked(project)

    image = db.session.get(ProjectImage, image_id)
    if image is None or image.project_id != project.id:
        return json_error("NOT_FOUND", "Foto no encontrada.", 404)

    log_action(image, "DELETE", before=serialize_model(image))
    warning = delete_project_image(image)
    db.session.commit()

    return jsonify(
        {
            "project": project.to_dict(),
            "deleted": image_id,
            "warnings": [warning] if warning else [],
        }
    )


# ---------------------------------------------------------------------
# Helpers for the submission form
# ---------------------------------------------------------------------
@projects_bp.route("/estimate", methods=["GET"])
@contractor_required
def estimate_liters():
    """Liters suggestion: ceil(area / yield of material)."""
    errors: List[FieldValidationError] = []

    area = parse_decimal(request.args.get("area"))
    if area is None:
        errors.append(FieldValidationError("area", "not_numeric"))
    elif area <= 0:
        errors.append(FieldValidationError("area", "not_positive"))

    material_key = (request.args.get("material") or "").strip().lower()
    if not material_key:
        errors.append(FieldValidationError("material", "required"))

    if errors:
        return field_errors_response(errors)

    material = get_material(material_key)
    return jsonify(
        {
            "area": str(area),
            "material": material.to_dict(),
            "liters": calculate_liters(area, material.key),
        }
    )


@projects_bp.route("/materials", methods=["GET"])
@login_required
def list_materials():
    grouped = materials_by_category()
    return jsonify(
        {"categories": {category: [m.to_dict() for m in items] for category, items in grouped.items()}}
    )


@projects_bp.route("/raffle", methods=["GET"])
@contractor_required
def raffle():
    """Tickets (validated projects) and the raffle of the contractor's region."""
    ctx = build_request_context()
    summary = raffle_summary(list_projects_by_contractor(ctx.actor_id))
    return jsonify(
        {
            "raffle": get_raffle(ctx.region_code).to_dict(),
            "tickets": summary["tickets"],
            "validated_projects": [p.to_dict() for p in summary["validated_projects"]],
            "awaiting_projects": [p.to_dict() for p in summary["awaiting_projects"]],
            "rejected_count": summary["rejected_count"],
        }
    )
