from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from registrar.common.listing import Page, paginate_query
from registrar.common.side_effects import run_side_effect
from registrar.models import AuditLog, SYSTEM_LOG_SUBJECT


@dataclass(frozen=True)
class LogEntry:
    name: str
    description: str
    logs_by: str
    student_id: str = SYSTEM_LOG_SUBJECT


class LogService:
    """Audit trail of admin and teacher actions, one row per event."""

    def create_log(self, db: Session, entry: LogEntry) -> AuditLog:
        db_log = AuditLog(
            student_id=entry.student_id,
            name=entry.name,
            description=entry.description,
            logs_by=entry.logs_by,
        )
        db.add(db_log)
        db.flush()
        return db_log

    def list_logs(self, db: Session, page: int = 1, page_size: int = 10, student_id: Optional[str] = None) -> Page:
        query = db.query(AuditLog)
        if student_id:
            query = query.filter(AuditLog.student_id == student_id.strip().upper())
        return paginate_query(query.order_by(AuditLog.date.desc()), page=page, page_size=page_size)

    # Strand / section events
    def strand_created(self, strand_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Strand Created", f'Strand "{strand_name}" was created', performed_by)

    def strand_updated(self, strand_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Strand Updated", f'Strand "{strand_name}" was updated', performed_by)

    def strand_deleted(self, strand_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Strand Deleted", f'Strand "{strand_name}" was deleted', performed_by)

    def section_created(self, section_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Section Created", f'Section "{section_name}" was created', performed_by)

    def section_updated(self, section_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Section Updated", f'Section "{section_name}" was updated', performed_by)

    def section_deleted(self, section_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Section Deleted", f'Section "{section_name}" was deleted', performed_by)

    def subject_changed(self, action: str, subject_name: str, performed_by: str) -> LogEntry:
        return LogEntry(f"Subject {action}", f'Subject "{subject_name}" was {action.lower()}', performed_by)

    # Student / teacher events
    def student_added(self, student_id: str, student_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Student Added", f"Student {student_name} was added to the system", performed_by, student_id)

    def student_updated(self, student_id: str, student_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Student Updated", f"Student {student_name} information was updated", performed_by, student_id)

    def student_deleted(self, student_id: str, student_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Student Deleted", f"Student {student_name} was deleted from the system", performed_by, student_id)

    def teacher_added(self, teacher_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Teacher Added", f"Teacher {teacher_name} was added to the system", performed_by)

    def teacher_updated(self, teacher_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Teacher Updated", f"Teacher {teacher_name} information was updated", performed_by)

    def teacher_deleted(self, teacher_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Teacher Deleted", f"Teacher {teacher_name} was deleted from the system", performed_by)

    def subject_record_changed(self, action: str, subject_name: str, section_name: str, performed_by: str) -> LogEntry:
        return LogEntry(f"Class {action}", f"{subject_name} class for section {section_name} was {action.lower()}", performed_by)

    # Grades
    def grade_added(self, student_id: str, student_name: str, subject_name: str, grade: int, performed_by: str) -> LogEntry:
        return LogEntry("Grade Added", f"Grade for {student_name} in {subject_name} was added: {grade}", performed_by, student_id)

    def grade_updated(self, student_id: str, student_name: str, subject_name: str, grade: int, performed_by: str) -> LogEntry:
        return LogEntry("Grade Updated", f"Grade for {student_name} in {subject_name} was updated to {grade}", performed_by, student_id)

    # Enrollment
    def enrollment_approved(self, student_id: str, student_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Enrollment Approved", f"Enrollment for {student_name} was approved", performed_by, student_id)

    def enrollment_rejected(self, student_id: str, student_name: str, performed_by: str) -> LogEntry:
        return LogEntry("Enrollment Rejected", f"Enrollment for {student_name} was rejected", performed_by, student_id)

    # Calendar
    def event_changed(self, action: str, title: str, performed_by: str) -> LogEntry:
        return LogEntry(f"Event {action}", f'Calendar event "{title}" was {action.lower()}', performed_by)

    def system_action(self, action: str, description: str, performed_by: str) -> LogEntry:
        return LogEntry(action, description, performed_by)


log_service = LogService()


def record_log(entry: LogEntry) -> bool:
    """Background-task entry point: write one audit entry, best-effort."""
    return run_side_effect(f"audit log '{entry.name}'", log_service.create_log, entry)
