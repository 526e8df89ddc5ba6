"""
Shared fixtures.

The app context is only held while creating rows; requests made through the
test client push their own context, so Flask-Login state never leaks between
requests.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from config import TestConfig
from paint_rewards import create_app
from paint_rewards.extensions import db
from paint_rewards.models import Project
from paint_rewards.repository import create_contractor, create_validator

PASSWORD = "secret123"


@pytest.fixture
def app(tmp_path):
    class _Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(_Config)
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_contractor(app):
    def _make(
        email="pintor@example.com",
        region_code="MX",
        sub_region_code="MX_CDMX",
        name="Juan Pérez",
        phone="5512345678",
        identifier="PEPJ800101AB1",
    ) -> int:
        with app.app_context():
            contractor = create_contractor(
                {
                    "name": name,
                    "email": email,
                    "phone": phone,
                    "identifier": identifier,
                    "region_code": region_code,
                    "sub_region_code": sub_region_code,
                    "password": PASSWORD,
                }
            )
            db.session.commit()
            return contractor.id

    return _make


@pytest.fixture
def make_validator(app):
    def _make(email="validador@example.com", region_code=None, sub_region_code=None) -> int:
        with app.app_context():
            validator = create_validator(email, "Validador", PASSWORD, region_code, sub_region_code)
            db.session.commit()
            return validator.id

    return _make


@pytest.fixture
def make_project(app):
    def _make(contractor_id: int, status="pending", **fields) -> int:
        values = {
            "name": "Casa Reforma",
            "location": "Av. Reforma 123, CDMX",
            "area": Decimal("120"),
            "material": "vinimex",
            "liters": 10,
        }
        values.update(fields)
        with app.app_context():
            project = Project(contractor_id=contractor_id, status=status, **values)
            db.session.add(project)
            db.session.commit()
            return project.id

    return _make


@pytest.fixture
def login():
    def _login(client, email="pintor@example.com", validator=False):
        path = "/auth/validator/login" if validator else "/auth/login"
        resp = client.post(path, json={"email": email, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return resp

    return _login
