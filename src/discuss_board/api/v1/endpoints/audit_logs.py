# src/discuss_board/api/v1/endpoints/audit_logs.py
"""Administrator access to the audit trail."""

from fastapi import APIRouter

from discuss_board.api.v1.dependencies import AdminDep, SessionDep
from discuss_board.schemas.audit import AuditLogResponse, AuditLogSearchRequest
from discuss_board.schemas.common import Page
from discuss_board.services import audit_service

router = APIRouter(prefix="/audit-logs", tags=["audit-logs"])


@router.patch("", response_model=Page[AuditLogResponse])
async def search_audit_logs(
    request: AuditLogSearchRequest, db: SessionDep, administrator: AdminDep
) -> dict:
    return audit_service.search_audit_logs(db, request)


@router.get("/{audit_log_id}", response_model=AuditLogResponse)
async def get_audit_log(
    audit_log_id: str, db: SessionDep, administrator: AdminDep
) -> AuditLogResponse:
    return AuditLogResponse.model_validate(audit_service.get_audit_log(db, audit_log_id))
