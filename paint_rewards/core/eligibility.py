"""
paint_rewards/core/eligibility.py

Raffle eligibility derived from project states.

One validated project = one ticket. Nothing here is stored: counts are
recomputed from the project set on every read, because a validation can land
between two reads.

Projects may be model instances or plain mappings; only ``status``,
``contractor_id`` and (for region counters) ``region_code`` are read.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .lifecycle import ProjectStatus, coerce_status, effective_status


def _field(project: Any, name: str) -> Any:
    if isinstance(project, Mapping):
        return project.get(name)
    return getattr(project, name, None)


def is_ticket(project: Any) -> bool:
    return coerce_status(_field(project, "status")) is ProjectStatus.VALIDATED


def validated_projects(projects: Iterable[Any]) -> List[Any]:
    return [p for p in projects if is_ticket(p)]


def ticket_count(projects: Iterable[Any]) -> int:
    """Number of projects whose status is exactly ``validated``."""
    return sum(1 for p in projects if is_ticket(p))


def participant_count(projects: Iterable[Any], region_code: Optional[str] = None) -> int:
    """
    Distinct contractors with at least one validated project.

    When ``region_code`` is given, only projects carrying that region are
    considered (see Project.region_code).
    """
    contractors = set()
    for project in projects:
        if region_code and _field(project, "region_code") != region_code:
            continue
        if is_ticket(project):
            contractors.add(_field(project, "contractor_id"))
    return len(contractors)


def status_counts(projects: Iterable[Any]) -> Dict[str, int]:
    """Counts per effective status (reviewing is counted as pending)."""
    counts = Counter(effective_status(_field(p, "status")).value for p in projects)
    return {
        ProjectStatus.PENDING.value: counts.get(ProjectStatus.PENDING.value, 0),
        ProjectStatus.VALIDATED.value: counts.get(ProjectStatus.VALIDATED.value, 0),
        ProjectStatus.REJECTED.value: counts.get(ProjectStatus.REJECTED.value, 0),
    }


def raffle_summary(projects: Iterable[Any]) -> Dict[str, Any]:
    """Per-contractor raffle view: tickets plus projects still awaiting review."""
    items = list(projects)
    validated = validated_projects(items)
    awaiting = [p for p in items if effective_status(_field(p, "status")) is ProjectStatus.PENDING]
    rejected = [p for p in items if coerce_status(_field(p, "status")) is ProjectStatus.REJECTED]
    return {
        "tickets": len(validated),
        "validated_projects": validated,
        "awaiting_projects": awaiting,
        "rejected_count": len(rejected),
    }
