"""
Utility functions shared across the blueprints. This includes:
- request_payload: Read a request body as a dict (JSON or form).
- parse_bool: Checkbox-style parsing of form/JSON flags.
- json_error / field_errors_response: Uniform JSON error bodies.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from flask import jsonify, request

from .core.errors import FieldValidationError

TRUE_VALUES = {"1", "true", "yes", "on", "si", "sí"}


def request_payload() -> Dict[str, Any]:
    """
    Return the submitted fields as a plain dict.

    JSON bodies are used as-is; otherwise the form fields (multipart uploads
    carry their text fields there).
    """
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()


def parse_bool(value: Any) -> bool:
    """Checkbox-style boolean: JSON true or one of TRUE_VALUES."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES


def json_error(code: str, message: str, status: int, **extra: Any):
    body = {"error": code, "message": message}
    body.update(extra)
    return jsonify(body), status


def field_errors_response(
    errors: Iterable[FieldValidationError],
    form: Optional[Dict[str, Any]] = None,
    status: int = 400,
):
    """Every field error at once (400 by default), plus the submitted form for re-display."""
    body: Dict[str, Any] = {
        "error": "VALIDATION_FAILED",
        "message": "Revisa los campos marcados.",
        "errors": [e.to_dict() for e in errors],
    }
    if form is not None:
        body["form"] = scrub_form(form)
    return jsonify(body), status


def scrub_form(form: Dict[str, Any]) -> Dict[str, Any]:
    """Echo-safe copy of a submitted form (passwords removed)."""
    return {k: v for k, v in form.items() if "password" not in k}
