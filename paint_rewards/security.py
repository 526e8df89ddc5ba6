"""
paint_rewards/security.py

Access control helpers.

Key rules:
- UI is never trusted; all permission checks are server-side.
- Two principal kinds share one Flask-Login session: contractors and
  validators (ids are prefixed "contractor:" / "validator:").
- Contractors only see and change their own projects.
- Validators with a region (and optionally a sub-region) only see and review
  projects whose contractor belongs to that scope. A validator without a
  region sees everything.

IMPORTANT:
- Decorators must preserve wrapped function metadata to avoid Flask endpoint collisions.
  We use functools.wraps everywhere.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Tuple

from flask import current_app, g, jsonify
from flask_login import current_user

from .core.context import ANONYMOUS, CONTRACTOR, VALIDATOR, RequestContext
from .repository import NotFound


def _forbidden(message: str = "No tienes permiso para realizar esta acción.") -> Tuple[Any, int]:
    return jsonify({"error": "FORBIDDEN", "message": message}), 403


def _unauthorized() -> Tuple[Any, int]:
    return jsonify({"error": "UNAUTHORIZED", "message": "Inicia sesión para continuar."}), 401


def _not_found(message: str = "Proyecto no encontrado.") -> Tuple[Any, int]:
    return jsonify({"error": "NOT_FOUND", "message": message}), 404


def is_contractor() -> bool:
    return bool(current_user.is_authenticated and getattr(current_user, "principal_type", None) == CONTRACTOR)


def is_validator() -> bool:
    return bool(
        current_user.is_authenticated
        and getattr(current_user, "principal_type", None) == VALIDATOR
        and getattr(current_user, "is_active", False)
    )


def build_request_context() -> RequestContext:
    """
    Resolve the acting principal once per request.

    Cached on flask.g so every component of the request sees the same context.
    """
    cached = getattr(g, "request_context", None)
    if cached is not None:
        return cached

    locale = current_app.config.get("DEFAULT_LOCALE", "es")
    if current_user.is_authenticated:
        ctx = RequestContext(
            actor_type=getattr(current_user, "principal_type", ANONYMOUS),
            actor_id=current_user.id,
            region_code=current_user.region_code,
            sub_region_code=current_user.sub_region_code,
            locale=locale,
        )
    else:
        ctx = RequestContext(locale=locale)

    g.request_context = ctx
    return ctx


def validator_can_access(ctx: RequestContext, project: Any) -> bool:
    """Region scope check for a validator acting on a project."""
    if not ctx.is_validator:
        return False
    if not ctx.is_region_scoped:
        return True
    contractor = project.contractor
    if contractor is None or contractor.region_code != ctx.region_code:
        return False
    if ctx.sub_region_code and contractor.sub_region_code != ctx.sub_region_code:
        return False
    return True


def contractor_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator: logged-in contractor only."""
    @wraps(view_func)
    def wrapper(*args: Any, **kwargs: Any):
        if not current_user.is_authenticated:
            return _unauthorized()
        if not is_contractor():
            return _forbidden()
        return view_func(*args, **kwargs)

    return wrapper


def validator_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator: logged-in, active validator only."""
    @wraps(view_func)
    def wrapper(*args: Any, **kwargs: Any):
        if not current_user.is_authenticated:
            return _unauthorized()
        if not is_validator():
            return _forbidden()
        return view_func(*args, **kwargs)

    return wrapper


def project_owner_required(get_project_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator factory: the current contractor must own the project.

    Usage:
        @project_owner_required(lambda project_id, **_: repository.get_project(project_id))
        def view(project_id): ...
    """
    def decorator(view_func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view_func)
        def wrapper(*args: Any, **kwargs: Any):
            if not current_user.is_authenticated:
                return _unauthorized()
            if not is_contractor():
                return _forbidden()

            try:
                project = get_project_func(**kwargs)
            except NotFound:
                return _not_found()

            if project.contractor_id != current_user.id:
                return _forbidden()

            return view_func(*args, **kwargs)

        return wrapper

    return decorator


def project_review_access_required(get_project_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator factory: validator allowed to see/review the project.

    Validators without a region: always allowed.
    Region-scoped validators: project contractor must be in the same region
    (and sub-region when the validator has one).
    """
    def decorator(view_func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view_func)
        def wrapper(*args: Any, **kwargs: Any):
            if not current_user.is_authenticated:
                return _unauthorized()
            if not is_validator():
                return _forbidden()

            try:
                project = get_project_func(**kwargs)
            except NotFound:
                return _not_found()

            if not validator_can_access(build_request_context(), project):
                return _forbidden("El proyecto no pertenece a tu región.")

            return view_func(*args, **kwargs)

        return wrapper

    return decorator
