from types import SimpleNamespace

from paint_rewards.core.eligibility import (
    participant_count,
    raffle_summary,
    status_counts,
    ticket_count,
)


def _p(status, contractor_id=1, region_code="MX"):
    return {"status": status, "contractor_id": contractor_id, "region_code": region_code}


PROJECTS = [
    _p("validated", 1),
    _p("validated", 1),
    _p("pending", 1),
    _p("reviewing", 2),
    _p("rejected", 2),
    _p("validated", 3, "HN"),
]


def test_ticket_count_equals_validated_count():
    assert ticket_count(PROJECTS) == 3
    assert ticket_count([]) == 0


def test_unvalidating_decrements_by_one():
    changed = [dict(p) for p in PROJECTS]
    changed[0]["status"] = "rejected"
    assert ticket_count(changed) == ticket_count(PROJECTS) - 1


def test_participants_are_distinct_contractors():
    assert participant_count(PROJECTS) == 2
    assert participant_count(PROJECTS, "MX") == 1
    assert participant_count(PROJECTS, "HN") == 1
    assert participant_count(PROJECTS, "BZ") == 0


def test_status_counts_fold_reviewing_into_pending():
    assert status_counts(PROJECTS) == {"pending": 2, "validated": 3, "rejected": 1}


def test_raffle_summary():
    summary = raffle_summary(PROJECTS)
    assert summary["tickets"] == 3
    assert len(summary["validated_projects"]) == 3
    assert len(summary["awaiting_projects"]) == 2
    assert summary["rejected_count"] == 1


def test_works_with_objects():
    projects = [SimpleNamespace(status="validated", contractor_id=5, region_code="SV")]
    assert ticket_count(projects) == 1
    assert participant_count(projects, "SV") == 1


def test_recomputation_is_stable():
    assert ticket_count(PROJECTS) == ticket_count(PROJECTS)
