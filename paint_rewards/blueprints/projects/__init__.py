"""
Projects blueprint package (contractor side).

Routes live in routes.py; this module only exposes the Blueprint object.
"""

from .routes import projects_bp  # noqa: F401
