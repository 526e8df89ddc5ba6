from paint_rewards.extensions import db
from paint_rewards.models import Validator


def _invoke(app, *args):
    return app.test_cli_runner().invoke(args=["seed-validator", *args])


def test_seed_validator_is_idempotent(app):
    first = _invoke(app, "val@example.com", "Val", "secret123", "--region", "mx", "--sub-region", "mx_cdmx")
    assert first.exit_code == 0, first.output
    assert "created" in first.output

    second = _invoke(app, "VAL@example.com", "Val Dos", "otra1234")
    assert second.exit_code == 0, second.output
    assert "updated" in second.output

    with app.app_context():
        [validator] = Validator.query.all()
        assert validator.name == "Val Dos"
        assert validator.region_code is None
        assert validator.check_password("otra1234")


def test_seed_validator_rejects_bad_scope(app):
    assert _invoke(app, "a@example.com", "A", "secret123", "--region", "GT").exit_code != 0
    assert _invoke(app, "a@example.com", "A", "secret123", "--region", "HN", "--sub-region", "MX_CDMX").exit_code != 0
    assert _invoke(app, "a@example.com", "A", "secret123", "--sub-region", "CDMX").exit_code != 0
    assert _invoke(app, "a@example.com", "A", "secret123", "--sub-region", "MX_NOWHERE").exit_code != 0

    with app.app_context():
        assert db.session.query(Validator).count() == 0


def test_seed_validator_infers_region_from_sub_region(app):
    result = _invoke(app, "cdmx@example.com", "Val", "secret123", "--sub-region", "mx_cdmx")
    assert result.exit_code == 0, result.output

    with app.app_context():
        validator = Validator.query.filter_by(email="cdmx@example.com").one()
        assert (validator.region_code, validator.sub_region_code) == ("MX", "MX_CDMX")
