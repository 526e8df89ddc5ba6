"""
Auth blueprint package (registration, login for contractors and validators).

Routes live in routes.py; this module only exposes the Blueprint object.
"""

from .routes import auth_bp  # noqa: F401
