"""
paint_rewards/audit.py

Audit logging helper utilities.

Goals:
- Capture WHO (contractor or validator) did WHAT to WHICH entity, with
  BEFORE/AFTER snapshots.
- Store an actor snapshot (email) so identity survives later profile edits.
- Store IP address for traceability.

IMPORTANT:
- This helper ADDS AuditLog entries to the current SQLAlchemy session.
  The calling route controls transaction boundaries (commit/rollback).
- Outside a request (CLI commands) the actor and IP are left empty.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from flask import has_request_context, request
from flask_login import current_user

from .extensions import db
from .models import AuditLog


def _safe_str(value: Any) -> Optional[str]:
    """
    Convert a value to a stable string representation suitable for JSON and DB storage.

    - For Decimal/datetime/etc: str(value) is typically safe.
    - For None: return None.
    """
    if value is None:
        return None
    return str(value)


def serialize_model(instance: Any) -> Dict[str, Optional[str]]:
    """
    Convert a SQLAlchemy model instance to a dict snapshot based on table columns.

    NOTES:
    - Captures only scalar column values (not relationships).
    - Password hashes are never copied into the audit trail.
    """
    data: Dict[str, Optional[str]] = {}
    for column in instance.__table__.columns:
        if column.name == "password_hash":
            continue
        data[column.name] = _safe_str(getattr(instance, column.name))
    return data


def _current_actor() -> tuple[Optional[str], Optional[int], Optional[str]]:
    if not has_request_context() or not current_user.is_authenticated:
        return None, None, None
    return (
        getattr(current_user, "principal_type", None),
        getattr(current_user, "id", None),
        getattr(current_user, "email", None),
    )


def log_action(
    entity: Any,
    action: str,
    *,
    before: Optional[Dict[str, Any]] = None,
    after: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Add an AuditLog entry to the current db session.

    Parameters:
        entity: SQLAlchemy model instance with .id (flushed)
        action: CREATE / UPDATE / VALIDATE / REJECT / RESUBMIT / DELETE
        before: dict snapshot (optional)
        after: dict snapshot (optional)
    """
    entity_id = getattr(entity, "id", None)
    if entity_id is None:
        raise ValueError("log_action entity must have an 'id' attribute (after flush).")

    actor_type, actor_id, actor_snapshot = _current_actor()

    entry = AuditLog(
        actor_type=actor_type,
        actor_id=actor_id,
        actor_snapshot=actor_snapshot,
        entity_type=entity.__class__.__name__,
        entity_id=int(entity_id),
        action=str(action),
        before_data=json.dumps(before, ensure_ascii=False) if before else None,
        after_data=json.dumps(after, ensure_ascii=False) if after else None,
        ip_address=request.remote_addr if has_request_context() else None,
    )
    db.session.add(entry)
    return entry
