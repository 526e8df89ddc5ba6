"""
Review blueprint package (validator side).

Routes live in routes.py; this module only exposes the Blueprint object.
"""

from .routes import review_bp  # noqa: F401
