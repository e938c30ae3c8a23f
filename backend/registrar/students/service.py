import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from registrar.common.listing import Page, paginate_query, prefix_range
from registrar.common.validation import normalize_human_id, require_fields
from registrar.errors import DuplicateError, NotFoundError
from registrar.models import Student, SubjectRecord, STUDENT_STATUSES, STUDENT_STATUS_NOT_SET
from registrar.students import schemas

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("student_id", "first_name", "last_name", "middle_name", "sex", "birth_date", "address")
EDITABLE_REQUIRED_FIELDS = REQUIRED_FIELDS[1:]

SEARCH_FIELDS = {
    "student_id": Student.student_id,
    "first_name": Student.first_name,
    "last_name": Student.last_name,
}


def _lookup_key(student_id: str) -> str:
    # IDs are stored uppercase, so lookups match regardless of the caller's casing
    return (student_id or "").strip().upper()


class StudentService:
    def get_by_student_id(self, db: Session, student_id: str) -> Optional[Student]:
        """Exact match on the human-facing ID (never a prefix match)."""
        return db.query(Student).filter(Student.student_id == _lookup_key(student_id)).first()

    def get_or_raise(self, db: Session, student_id: str) -> Student:
        student = self.get_by_student_id(db, student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def list_students(
        self,
        db: Session,
        search: Optional[str] = None,
        field: str = "student_id",
        status: Optional[str] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page:
        """
        One page of students.

        With a search term the results are a prefix match on ``field``,
        ordered by that field; without one they are the most recently
        created students. The status filter and the total are computed in
        the same query, so counts cover the whole collection.
        """
        if field not in SEARCH_FIELDS:
            raise ValueError(f"Cannot search by {field}")

        query = db.query(Student)
        if status == STUDENT_STATUS_NOT_SET:
            query = query.filter(or_(Student.status.is_(None), Student.status.notin_(STUDENT_STATUSES)))
        elif status:
            query = query.filter(Student.status == status)

        if search and search.strip():
            query = prefix_range(query, SEARCH_FIELDS[field], search)
        else:
            query = query.order_by(Student.created_at.desc())

        return paginate_query(query, page=page, page_size=page_size)

    def create_student(self, db: Session, student_in: schemas.StudentCreate) -> Student:
        values = student_in.model_dump()
        student_id = normalize_human_id(values["student_id"], "Student ID")
        require_fields(values, REQUIRED_FIELDS)
        if self.get_by_student_id(db, student_id):
            raise DuplicateError("Student ID already exists")

        values["student_id"] = student_id
        db_student = Student(**values)
        db.add(db_student)
        try:
            db.commit()
        except IntegrityError:
            # Two concurrent creates: the unique index decides
            db.rollback()
            raise DuplicateError("Student ID already exists")
        db.refresh(db_student)
        logger.info(f"Created student {db_student.student_id}")
        return db_student

    def update_student(self, db: Session, student_id: str, student_update: schemas.StudentUpdate) -> Student:
        db_student = self.get_or_raise(db, student_id)
        values = student_update.model_dump(exclude_unset=True)
        merged = {field: getattr(db_student, field) for field in EDITABLE_REQUIRED_FIELDS}
        merged.update(values)
        require_fields(merged, EDITABLE_REQUIRED_FIELDS)
        for field, value in values.items():
            setattr(db_student, field, value)
        db.commit()
        db.refresh(db_student)
        return db_student

    def update_own_profile(self, db: Session, student_id: str, profile_update: schemas.StudentSelfUpdate) -> Student:
        db_student = self.get_or_raise(db, student_id)
        for field, value in profile_update.model_dump(exclude_unset=True).items():
            setattr(db_student, field, value)
        db_student.profile_complete = bool(db_student.contact_number and db_student.address)
        db.commit()
        db.refresh(db_student)
        return db_student

    def set_status(self, db: Session, student_id: str, status: str) -> Student:
        if status not in STUDENT_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(STUDENT_STATUSES)}")
        db_student = self.get_or_raise(db, student_id)
        db_student.status = status
        db.commit()
        db.refresh(db_student)
        return db_student

    def delete_student(self, db: Session, student_id: str) -> Student:
        """
        Delete exactly one student by human-facing ID.

        The student is also dropped from every subject-record roster and
        grade sheet in the same transaction.
        """
        db_student = self.get_or_raise(db, student_id)
        key = db_student.student_id

        for record in self.subject_records_for(db, key):
            record.student_list = [sid for sid in (record.student_list or []) if sid != key]
            record.student_grades = [g for g in (record.student_grades or []) if g.get("student_id") != key]

        db.delete(db_student)
        db.commit()
        logger.info(f"Deleted student {key}")
        return db_student

    def subject_records_for(self, db: Session, student_id: str) -> List[SubjectRecord]:
        key = _lookup_key(student_id)
        records = db.query(SubjectRecord).order_by(SubjectRecord.created_at.desc()).all()
        return [
            record for record in records
            if key in (record.student_list or [])
            or any(grade.get("student_id") == key for grade in (record.student_grades or []))
        ]


student_service = StudentService()
