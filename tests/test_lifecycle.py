from datetime import datetime

import pytest

from paint_rewards.core import lifecycle
from paint_rewards.core.errors import (
    LifecycleViolation,
    MissingConfirmation,
    MissingRejectionReason,
    MissingValidator,
)
from paint_rewards.core.lifecycle import DEFAULT_VALIDATION_NOTE, ProjectStatus

NOW = datetime(2025, 1, 15, 10, 30)


def test_transition_table():
    assert lifecycle.can_transition("pending", "validated")[0]
    assert lifecycle.can_transition("pending", "rejected")[0]
    assert lifecycle.can_transition("rejected", "pending")[0]
    assert not lifecycle.can_transition("rejected", "validated")[0]
    allowed, reason = lifecycle.can_transition("validated", "rejected")
    assert not allowed
    assert "terminal" in reason


def test_reviewing_behaves_as_pending():
    assert lifecycle.effective_status("reviewing") is ProjectStatus.PENDING
    assert lifecycle.can_transition("reviewing", "validated")[0]
    assert lifecycle.coerce_status(None) is ProjectStatus.PENDING


def test_validate_builds_patch():
    patch = lifecycle.validate(
        "pending", validator_id=7, physical_check_confirmed=True, notes=" Todo correcto ", now=NOW
    )
    assert patch == {
        "status": "validated",
        "validator_id": 7,
        "validation_notes": "Todo correcto",
        "validation_date": NOW,
    }


def test_validate_uses_default_note():
    patch = lifecycle.validate("pending", validator_id=7, physical_check_confirmed=True, notes="   ")
    assert patch["validation_notes"] == DEFAULT_VALIDATION_NOTE
    assert isinstance(patch["validation_date"], datetime)


def test_validate_requires_confirmation():
    with pytest.raises(MissingConfirmation):
        lifecycle.validate("pending", validator_id=7, physical_check_confirmed=False)


def test_validate_requires_validator():
    with pytest.raises(MissingValidator):
        lifecycle.validate("pending", validator_id=None, physical_check_confirmed=True)


def test_validated_is_terminal():
    with pytest.raises(LifecycleViolation) as exc_info:
        lifecycle.validate("validated", validator_id=7, physical_check_confirmed=True)
    assert exc_info.value.to_dict()["from"] == "validated"
    assert lifecycle.is_terminal("validated")


def test_transition_checked_before_confirmation():
    with pytest.raises(LifecycleViolation):
        lifecycle.validate("rejected", validator_id=7, physical_check_confirmed=False)


def test_reject_requires_notes():
    for notes in (None, "", "   "):
        with pytest.raises(MissingRejectionReason):
            lifecycle.reject("pending", validator_id=7, notes=notes)


def test_reject_builds_patch():
    patch = lifecycle.reject("pending", validator_id=3, notes="Fotos borrosas", now=NOW)
    assert patch["status"] == "rejected"
    assert patch["validation_notes"] == "Fotos borrosas"
    assert patch["validator_id"] == 3


def test_cannot_reject_twice():
    with pytest.raises(LifecycleViolation):
        lifecycle.reject("rejected", validator_id=3, notes="otra vez")


def test_resubmit_clears_review_fields():
    patch = lifecycle.resubmit("rejected", changes={"name": "Casa nueva", "status": "validated", "validator_id": 9})
    assert patch == {
        "name": "Casa nueva",
        "status": "pending",
        "validator_id": None,
        "validation_notes": None,
        "validation_date": None,
    }


@pytest.mark.parametrize("status", ["pending", "reviewing", "validated"])
def test_resubmit_only_from_rejected(status):
    with pytest.raises(LifecycleViolation):
        lifecycle.resubmit(status)


def test_images_locked_only_when_validated():
    assert lifecycle.can_edit_images("pending")
    assert lifecycle.can_edit_images("rejected")
    assert not lifecycle.can_edit_images("validated")


def test_non_string_notes_are_stringified():
    assert lifecycle.reject("pending", validator_id=3, notes=123, now=NOW)["validation_notes"] == "123"
    patch = lifecycle.validate("pending", validator_id=3, physical_check_confirmed=True, notes=0, now=NOW)
    assert patch["validation_notes"] == "0"
