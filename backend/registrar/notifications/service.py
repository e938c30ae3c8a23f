from typing import List

from sqlalchemy.orm import Session

from registrar.common.side_effects import run_side_effect
from registrar.errors import NotFoundError
from registrar.models import Notification


class NotificationService:
    """Messages to one student, written alongside enrollment decisions."""

    def create_notification(self, db: Session, student_id: str, title: str, description: str) -> Notification:
        db_notification = Notification(student_id=student_id, title=title, description=description, read=False)
        db.add(db_notification)
        db.flush()
        return db_notification

    def list_for_student(self, db: Session, student_id: str) -> List[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.student_id == student_id)
            .order_by(Notification.created_at.desc())
            .all()
        )

    def mark_read(self, db: Session, notification_id: str, student_id: str) -> Notification:
        # Another student's notification reads as missing
        db_notification = db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.student_id == student_id,
        ).first()
        if not db_notification:
            raise NotFoundError(f"Notification {notification_id} not found")
        db_notification.read = True
        db.commit()
        db.refresh(db_notification)
        return db_notification


notification_service = NotificationService()


def send_notification(student_id: str, title: str, description: str) -> bool:
    return run_side_effect(
        f"notification '{title}' to {student_id}",
        notification_service.create_notification,
        student_id,
        title,
        description,
    )
