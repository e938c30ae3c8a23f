from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from registrar.auth.dependencies import SessionContext, require_student
from registrar.database import get_db
from registrar.errors import to_http_exception, NotFoundError
from registrar.notifications.schemas import NotificationResponse
from registrar.notifications.service import notification_service

router = APIRouter(
    prefix="/api/notifications",
    tags=["notifications"],
)


@router.get("", response_model=List[NotificationResponse])
def list_notifications(db: Session = Depends(get_db), session: SessionContext = Depends(require_student)):
    """The signed-in student's notifications, newest first."""
    if not session.student_id:
        raise HTTPException(status_code=403, detail="This account is not linked to a student record")
    return notification_service.list_for_student(db, session.student_id)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_student),
):
    try:
        return notification_service.mark_read(db, notification_id, session.student_id or "")
    except NotFoundError as e:
        raise to_http_exception(e)
