import pytest

from paint_rewards.core.lifecycle import DEFAULT_VALIDATION_NOTE
from paint_rewards.extensions import db
from paint_rewards.models import AuditLog, Project


@pytest.fixture
def mx_contractor(make_contractor):
    return make_contractor()


@pytest.fixture
def hn_contractor(make_contractor):
    return make_contractor(
        email="hn@example.com",
        region_code="HN",
        sub_region_code=None,
        phone="98765432",
        identifier=None,
    )


@pytest.fixture
def validator_client(app, make_validator, login):
    def _client(region_code=None, sub_region_code=None, email="validador@example.com"):
        make_validator(email=email, region_code=region_code, sub_region_code=sub_region_code)
        client = app.test_client()
        login(client, email, validator=True)
        return client

    return _client


def test_contractor_cannot_review(client, mx_contractor, login):
    login(client)
    assert client.get("/review/projects").status_code == 403


def test_unscoped_validator_sees_everything(validator_client, mx_contractor, hn_contractor, make_project):
    make_project(mx_contractor)
    make_project(hn_contractor, location="Tegucigalpa, Honduras")
    client = validator_client()

    body = client.get("/review/projects").get_json()
    assert body["count"] == 2
    assert body["projects"][0]["contractor"]["email"] in {"pintor@example.com", "hn@example.com"}

    narrowed = client.get("/review/projects?region=HN").get_json()
    assert narrowed["count"] == 1


def test_region_scoped_validator(validator_client, mx_contractor, hn_contractor, make_project):
    mx_project = make_project(mx_contractor)
    hn_project = make_project(hn_contractor, location="Tegucigalpa, Honduras")
    client = validator_client(region_code="HN")

    body = client.get("/review/projects?region=MX").get_json()
    assert [p["id"] for p in body["projects"]] == [hn_project]
    assert body["filters"]["region"] == "HN"

    assert client.get(f"/review/projects/{hn_project}").status_code == 200
    assert client.get(f"/review/projects/{mx_project}").status_code == 403
    resp = client.post(f"/review/projects/{mx_project}/validate", json={"physical_check_confirmed": True})
    assert resp.status_code == 403


def test_sub_region_scoped_validator(validator_client, make_contractor, make_project):
    cdmx = make_contractor()
    guerrero = make_contractor(email="gro@example.com", sub_region_code="MX_GUERRERO")
    cdmx_project = make_project(cdmx)
    make_project(guerrero, location="Costera 12, Acapulco")
    client = validator_client(region_code="MX", sub_region_code="MX_CDMX")

    body = client.get("/review/projects").get_json()
    assert [p["id"] for p in body["projects"]] == [cdmx_project]


def test_status_filter(validator_client, mx_contractor, make_project):
    make_project(mx_contractor, status="pending")
    make_project(mx_contractor, status="reviewing")
    make_project(mx_contractor, status="validated")
    client = validator_client()

    assert client.get("/review/projects?status=pending").get_json()["count"] == 2
    assert client.get("/review/projects?status=validated").get_json()["count"] == 1
    assert client.get("/review/projects?status=archived").status_code == 400


def test_detail_lists_allowed_actions(validator_client, mx_contractor, make_project):
    pending = make_project(mx_contractor)
    validated = make_project(mx_contractor, status="validated")
    client = validator_client()

    assert client.get(f"/review/projects/{pending}").get_json()["allowed_actions"] == ["validated", "rejected"]
    assert client.get(f"/review/projects/{validated}").get_json()["allowed_actions"] == []
    assert client.get("/review/projects/9999").status_code == 404


def test_validate_requires_confirmation(app, validator_client, mx_contractor, make_project):
    project_id = make_project(mx_contractor)
    client = validator_client()

    resp = client.post(f"/review/projects/{project_id}/validate", json={"notes": "ok"})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "MISSING_CONFIRMATION"

    with app.app_context():
        project = db.session.get(Project, project_id)
        assert project.status == "pending"
        assert project.validator_id is None


def test_validate_project(app, validator_client, mx_contractor, make_project):
    project_id = make_project(mx_contractor)
    client = validator_client()

    resp = client.post(f"/review/projects/{project_id}/validate", json={"physical_check_confirmed": True})
    assert resp.status_code == 200
    project = resp.get_json()["project"]
    assert project["status"] == "validated"
    assert project["validation_notes"] == DEFAULT_VALIDATION_NOTE
    assert project["validation_date"] is not None

    again = client.post(f"/review/projects/{project_id}/validate", json={"physical_check_confirmed": True})
    assert again.status_code == 409
    assert again.get_json()["error"] == "LIFECYCLE_VIOLATION"

    with app.app_context():
        entry = AuditLog.query.filter_by(action="VALIDATE").one()
        assert entry.actor_type == "validator"
        assert entry.entity_id == project_id


def test_validate_with_form_checkbox(validator_client, mx_contractor, make_project):
    project_id = make_project(mx_contractor)
    client = validator_client()
    resp = client.post(
        f"/review/projects/{project_id}/validate",
        data={"physical_check_confirmed": "on", "notes": "Visita 12/01"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["project"]["validation_notes"] == "Visita 12/01"


def test_reject_requires_notes(app, validator_client, mx_contractor, make_project):
    project_id = make_project(mx_contractor)
    client = validator_client()

    resp = client.post(f"/review/projects/{project_id}/reject", json={"notes": "  "})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "MISSING_REJECTION_REASON"
    with app.app_context():
        assert db.session.get(Project, project_id).status == "pending"

    resp = client.post(f"/review/projects/{project_id}/reject", json={"notes": "Las fotos no muestran la obra"})
    assert resp.status_code == 200
    assert resp.get_json()["project"]["status"] == "rejected"


def test_reject_with_numeric_json_notes(validator_client, mx_contractor, make_project):
    project_id = make_project(mx_contractor)
    resp = validator_client().post(f"/review/projects/{project_id}/reject", json={"notes": 123})
    assert resp.status_code == 200
    assert resp.get_json()["project"]["validation_notes"] == "123"


def test_full_cycle_reject_resubmit_validate(app, client, login, validator_client, mx_contractor, make_project):
    project_id = make_project(mx_contractor)
    reviewer = validator_client()
    login(client)

    reviewer.post(f"/review/projects/{project_id}/reject", json={"notes": "Faltan fotos"})
    assert client.get("/projects/raffle").get_json()["tickets"] == 0

    resp = client.post(f"/projects/{project_id}/resubmit", json={})
    assert resp.get_json()["project"]["status"] == "pending"

    reviewer.post(f"/review/projects/{project_id}/validate", json={"physical_check_confirmed": True})
    assert client.get("/projects/raffle").get_json()["tickets"] == 1


def test_stats(validator_client, mx_contractor, hn_contractor, make_project):
    make_project(mx_contractor, status="validated")
    make_project(mx_contractor, status="validated")
    make_project(mx_contractor, status="reviewing")
    make_project(hn_contractor, status="validated", location="Tegucigalpa")
    make_project(hn_contractor, status="rejected", location="Tegucigalpa")

    body = validator_client().get("/review/stats").get_json()
    assert body["status_counts"] == {"pending": 1, "validated": 3, "rejected": 1}
    assert body["tickets"] == 3
    assert body["participants"] == 2
    assert body["participants_by_region"] == {"MX": 1, "HN": 1, "SV": 0, "BZ": 0}

    scoped = validator_client(region_code="HN", email="hn.val@example.com").get("/review/stats").get_json()
    assert scoped["tickets"] == 1
    assert scoped["participants_by_region"] == {"HN": 1}
