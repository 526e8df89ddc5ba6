"""
paint_rewards/__init__.py

Flask application factory for the Paint Rewards evidence service.

Requirements:
- Contractors submit painting projects with photo evidence; validators review
  them; every validated project is one raffle ticket.
- SQLite is used for dev; any SQLAlchemy URL works (DATABASE_URL).
- UI is never trusted; server-side access control is enforced.

Surface:
- JSON endpoints only, grouped in three blueprints:
  1) auth      (registration, login for both principal kinds, profile)
  2) projects  (contractor submissions and evidence)
  3) review    (validator queue, validate/reject, counters)
"""

from __future__ import annotations

import logging

import click
from flask import Flask, jsonify, request, send_from_directory, url_for
from flask_login import current_user
from flask_wtf.csrf import CSRFError
from sqlalchemy.exc import SQLAlchemyError

from .core.context import CONTRACTOR, VALIDATOR
from .core.errors import LifecycleError, PaintRewardsError, UnknownMaterial, UnknownRegion
from .extensions import csrf, db, login_manager, migrate
from .images import LocalImageStore
from .models import Contractor, Validator
from .repository import DuplicateIdentity, NotFound
from .utils import json_error, scrub_form

logger = logging.getLogger(__name__)

# Blueprint imports kept inside create_app() where possible to reduce import side effects.


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger(__name__).setLevel(level)
    app.logger.setLevel(level)


def _register_error_handlers(app: Flask) -> None:
    """
    Map domain and collaborator errors to JSON responses.

    Routes may still catch these themselves when they need a more specific body.
    """

    @app.errorhandler(LifecycleError)
    def _lifecycle_error(exc: LifecycleError):
        return jsonify(exc.to_dict()), 409

    @app.errorhandler(UnknownRegion)
    @app.errorhandler(UnknownMaterial)
    def _catalog_error(exc: PaintRewardsError):
        return jsonify(exc.to_dict()), 400

    @app.errorhandler(NotFound)
    def _not_found_error(exc: NotFound):
        return json_error("NOT_FOUND", f"{exc.entity} no encontrado.", 404)

    @app.errorhandler(DuplicateIdentity)
    def _duplicate_error(exc: DuplicateIdentity):
        db.session.rollback()
        return json_error("DUPLICATE_IDENTITY", "Ya existe una cuenta con ese correo.", 409)

    @app.errorhandler(SQLAlchemyError)
    def _storage_error(exc: SQLAlchemyError):
        db.session.rollback()
        logger.exception("Storage failure on %s %s", request.method, request.path)
        form = request.get_json(silent=True) if request.is_json else request.form.to_dict()
        return json_error(
            "STORAGE_UNAVAILABLE",
            "No se pudo guardar la información. Intenta de nuevo.",
            503,
            form=scrub_form(form) if isinstance(form, dict) else None,
        )

    @app.errorhandler(CSRFError)
    def _csrf_error(exc: CSRFError):
        return json_error("CSRF_FAILED", exc.description, 400)

    @app.errorhandler(403)
    def _forbidden(exc):
        return json_error("FORBIDDEN", "No tienes permiso para realizar esta acción.", 403)

    @app.errorhandler(404)
    def _not_found(exc):
        return json_error("NOT_FOUND", "Recurso no encontrado.", 404)

    @app.errorhandler(413)
    def _too_large(exc):
        return json_error("PAYLOAD_TOO_LARGE", "Los archivos superan el tamaño permitido.", 413)


def create_app(config_object: str | object = "config.Config") -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    _configure_logging(app)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id: str):
        """Load a contractor or validator from the prefixed session id."""
        kind, _, raw_id = (user_id or "").partition(":")
        if not raw_id.isdigit():
            return None
        if kind == CONTRACTOR:
            return db.session.get(Contractor, int(raw_id))
        if kind == VALIDATOR:
            validator = db.session.get(Validator, int(raw_id))
            return validator if validator and validator.is_active else None
        return None

    @login_manager.unauthorized_handler
    def _unauthorized():
        return json_error("UNAUTHORIZED", "Inicia sesión para continuar.", 401)

    # Image store
    app.extensions["image_store"] = LocalImageStore.from_config(app.config)

    @app.route(f"{app.config['IMAGE_BASE_URL'].rstrip('/')}/<path:filename>")
    def uploaded_image(filename: str):
        return send_from_directory(app.config["UPLOAD_FOLDER"], filename)

    _register_error_handlers(app)

    # ----------------------------------------------------------------------
    # Blueprints
    # ----------------------------------------------------------------------
    from .blueprints.auth import auth_bp
    from .blueprints.projects import projects_bp
    from .blueprints.review import review_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(review_bp)

    # ----------------------------------------------------------------------
    # CLI
    # ----------------------------------------------------------------------
    @app.cli.command("seed-validator")
    @click.argument("email")
    @click.argument("name")
    @click.argument("password")
    @click.option("--region", "region_code", default=None, help="Region code (MX, HN, SV, BZ).")
    @click.option(
        "--sub-region",
        "sub_region_code",
        default=None,
        help="Sub-region code; implies its region when --region is omitted.",
    )
    def seed_validator_command(email, name, password, region_code, sub_region_code):
        """Create or update a validator account."""
        from .seed import seed_validator

        try:
            validator, created = seed_validator(email, name, password, region_code, sub_region_code)
        except (ValueError, UnknownRegion) as exc:
            raise click.BadParameter(str(exc)) from exc

        verb = "created" if created else "updated"
        click.echo(f"Validator {validator.email} {verb}.")

    # ----------------------------------------------------------------------
    # Home
    # ----------------------------------------------------------------------
    @app.route("/")
    def index():
        """Entry point: tells the client where to go next."""
        if current_user.is_authenticated:
            if current_user.principal_type == VALIDATOR:
                return jsonify({"next": url_for("review.list_projects")})
            return jsonify({"next": url_for("projects.list_projects")})
        return jsonify({"next": url_for("auth.login"), "app": app.config.get("APP_NAME")})

    return app
