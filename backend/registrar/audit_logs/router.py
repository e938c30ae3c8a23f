from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from registrar.audit_logs.schemas import AuditLogResponse
from registrar.audit_logs.service import log_service
from registrar.auth.dependencies import SessionContext, require_admin
from registrar.common.schemas import PageResponse
from registrar.config.settings import settings
from registrar.database import get_db

router = APIRouter(
    prefix="/api/logs",
    tags=["logs"],
)


@router.get("", response_model=PageResponse[AuditLogResponse])
def list_logs(
    student_id: Optional[str] = Query(None, description="Only entries about this student"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    result = log_service.list_logs(db, page=page, page_size=page_size, student_id=student_id)
    items = [AuditLogResponse.model_validate(entry) for entry in result.items]
    return PageResponse[AuditLogResponse].from_page(result, items)
