"""
Application configuration.
This module defines the configuration settings for the Flask application, including database connection, secret key,
image upload storage and logging. It uses environment variables for sensitive information and defaults for development.
In production, make sure to set the appropriate environment variables and secure the secret key.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Base configuration shared by all environments."""

    # IMPORTANT: change this in production
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-change-me-please")

    # Database: SQLite for development (simple file in project folder)
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'paint_rewards.db'}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # CSRF protection (JSON clients send the token in the X-CSRFToken header)
    WTF_CSRF_ENABLED = True

    APP_NAME = "Paint Rewards"

    # Evidence images (local disk image store)
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", str(BASE_DIR / "uploads"))
    IMAGE_BASE_URL = os.environ.get("IMAGE_BASE_URL", "/uploads")
    ALLOWED_IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "heic"}
    MAX_IMAGES_PER_PROJECT = int(os.environ.get("MAX_IMAGES_PER_PROJECT", "10"))
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024

    DEFAULT_LOCALE = os.environ.get("DEFAULT_LOCALE", "es")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    """Configuration used by the test suite."""

    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = "DEBUG"
