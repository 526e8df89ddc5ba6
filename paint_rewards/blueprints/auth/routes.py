"""
Authentication Routes

Provides:
- /auth/csrf-token       (token for JSON clients, sent back as X-CSRFToken)
- /auth/regions          (region catalog for registration forms)
- /auth/register         (contractor self-registration)
- /auth/login            (contractor login)
- /auth/validator/login  (validator login)
- /auth/logout
- /auth/profile          (contractor profile view/edit)

Rules:
- Region and sub-region are fixed at registration; the profile edit only
  touches name/email/phone.
- Validators are never self-registered (see `flask seed-validator`).
- Only active validators may log in.
"""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from ...audit import log_action, serialize_model
from ...core.errors import FieldValidationError
from ...core.regions import all_regions
from ...core.submission import validate_contractor_profile, validate_contractor_registration
from ...extensions import db
from ...repository import (
    DuplicateIdentity,
    NotFound,
    create_contractor,
    get_contractor,
    get_validator,
    update_contractor,
)
from ...security import contractor_required
from ...utils import field_errors_response, json_error, parse_bool, request_payload

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _bad_credentials():
    return json_error("INVALID_CREDENTIALS", "Correo o contraseña incorrectos.", 401)


def _duplicate_email(form):
    return field_errors_response([FieldValidationError("email", "already_registered")], form, status=409)


# ============================================================
# CATALOG / CSRF
# ============================================================

@auth_bp.route("/csrf-token", methods=["GET"])
def csrf_token():
    return jsonify({"csrf_token": generate_csrf()})


@auth_bp.route("/regions", methods=["GET"])
def regions():
    """Region catalog: identifier/phone rules and sub-regions per region."""
    return jsonify({"regions": [r.to_dict() for r in all_regions()]})


# ============================================================
# REGISTER
# ============================================================

@auth_bp.route("/register", methods=["POST"])
def register():
    """
    Register a contractor and log them in.

    Logic:
    - All fields validated at once (400 with the full error list)
    - Duplicate email -> 409
    """
    form = request_payload()
    result = validate_contractor_registration(form)
    if not result.accepted:
        return field_errors_response(result.errors, form)

    try:
        contractor = create_contractor(result.record)
    except DuplicateIdentity:
        return _duplicate_email(form)

    log_action(contractor, "CREATE", after=serialize_model(contractor))
    db.session.commit()

    login_user(contractor)
    logger.info("Contractor %s registered", contractor.id)
    return jsonify({"contractor": contractor.to_dict()}), 201


# ============================================================
# LOGIN / LOGOUT
# ============================================================

@auth_bp.route("/login", methods=["POST"])
def login():
    """Authenticate a contractor by email + password."""
    form = request_payload()
    email = str(form.get("email") or "").strip().lower()
    password = str(form.get("password") or "")

    if not email or not password:
        return _bad_credentials()

    try:
        contractor = get_contractor(email)
    except NotFound:
        return _bad_credentials()

    if not contractor.check_password(password):
        logger.info("Failed contractor login for %s", email)
        return _bad_credentials()

    login_user(contractor, remember=parse_bool(form.get("remember")))
    return jsonify({"contractor": contractor.to_dict()})


@auth_bp.route("/validator/login", methods=["POST"])
def validator_login():
    """
    Authenticate a validator.

    Logic:
    - Only active validators may log in
    - Credentials validated via password hash
    """
    form = request_payload()
    email = str(form.get("email") or "").strip().lower()
    password = str(form.get("password") or "")

    try:
        validator = get_validator(email)
    except NotFound:
        return _bad_credentials()

    if not validator.check_password(password):
        logger.info("Failed validator login for %s", email)
        return _bad_credentials()

    if not validator.is_active:
        return json_error("INACTIVE_ACCOUNT", "La cuenta está inactiva.", 403)

    login_user(validator)
    return jsonify({"validator": validator.to_dict()})


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    """Log out the current principal."""
    logout_user()
    return jsonify({"message": "Sesión cerrada."})


# ============================================================
# PROFILE
# ============================================================

@auth_bp.route("/profile", methods=["GET", "POST"])
@contractor_required
def profile():
    """
    View or edit the contractor profile.

    POST accepts any subset of name/email/phone; missing fields keep their
    current value and the merged result is validated with the contractor's
    stored region rules.
    """
    contractor = current_user._get_current_object()
    if request.method != "POST":
        return jsonify({"contractor": contractor.to_dict()})

    form = request_payload()
    merged = {
        "name": form.get("name", contractor.name),
        "email": form.get("email", contractor.email),
        "phone": form.get("phone", contractor.phone),
    }
    result = validate_contractor_profile(merged, contractor.region_code)
    if not result.accepted:
        return field_errors_response(result.errors, form)

    before = serialize_model(contractor)
    try:
        update_contractor(contractor, result.record)
    except DuplicateIdentity:
        return _duplicate_email(form)

    log_action(contractor, "UPDATE", before=before, after=serialize_model(contractor))
    db.session.commit()
    return jsonify({"contractor": contractor.to_dict()})
