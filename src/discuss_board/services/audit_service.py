"""Writing and searching the audit trail."""
from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from discuss_board.core.errors import NotFoundError
from discuss_board.models import AuditLog
from discuss_board.schemas.audit import AuditLogSearchRequest
from discuss_board.services.pagination import apply_created_range, apply_sort, paginate

__all__ = ["record", "search_audit_logs", "get_audit_log"]

_SORT_COLUMNS = {
    "created_at": AuditLog.created_at,
    "action_type": AuditLog.action_type,
    "actor_role": AuditLog.actor_role,
}


def record(
    db: Session,
    *,
    actor_id: str | None,
    actor_role: str,
    action_type: str,
    target_table: str,
    target_id: str | None = None,
    description: str | None = None,
) -> AuditLog:
    """Stage an audit row; the caller's commit persists it with the change it describes."""
    entry = AuditLog(
        actor_id=actor_id,
        actor_role=actor_role,
        action_type=action_type,
        target_table=target_table,
        target_id=target_id,
        description=description,
    )
    db.add(entry)
    return entry


def search_audit_logs(db: Session, request: AuditLogSearchRequest) -> dict[str, Any]:
    """Return one page of audit rows matching the filters."""
    query = db.query(AuditLog)
    if request.actor_role:
        query = query.filter(AuditLog.actor_role == request.actor_role)
    if request.actor_id:
        query = query.filter(AuditLog.actor_id == request.actor_id)
    if request.action_type:
        query = query.filter(AuditLog.action_type == request.action_type)
    if request.target_table:
        query = query.filter(AuditLog.target_table == request.target_table)
    if request.target_id:
        query = query.filter(AuditLog.target_id == request.target_id)
    if request.description:
        query = query.filter(AuditLog.description.icontains(request.description))
    query = apply_created_range(query, AuditLog.created_at, request)
    query = apply_sort(query, _SORT_COLUMNS[request.sort_by], request, AuditLog.id)
    return paginate(query, request)


def get_audit_log(db: Session, audit_log_id: str) -> AuditLog:
    entry = db.get(AuditLog, audit_log_id)
    if entry is None:
        raise NotFoundError("Audit log not found")
    return entry
