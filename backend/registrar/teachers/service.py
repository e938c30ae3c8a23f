import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from registrar.common.listing import Page, paginate_query, prefix_range
from registrar.common.validation import normalize_human_id, require_fields
from registrar.errors import DuplicateError, NotFoundError
from registrar.models import Teacher
from registrar.sections.crud import get_section_or_raise
from registrar.teachers import schemas

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("employee_id", "first_name", "last_name", "email")
EDITABLE_REQUIRED_FIELDS = REQUIRED_FIELDS[1:]

SEARCH_FIELDS = {
    "employee_id": Teacher.employee_id,
    "first_name": Teacher.first_name,
    "last_name": Teacher.last_name,
}


class TeacherService:
    def get_by_employee_id(self, db: Session, employee_id: str) -> Optional[Teacher]:
        return db.query(Teacher).filter(Teacher.employee_id == (employee_id or "").strip().upper()).first()

    def get_or_raise(self, db: Session, employee_id: str) -> Teacher:
        teacher = self.get_by_employee_id(db, employee_id)
        if not teacher:
            raise NotFoundError(f"Teacher {employee_id} not found")
        return teacher

    def list_teachers(
        self,
        db: Session,
        search: Optional[str] = None,
        field: str = "employee_id",
        active: Optional[bool] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page:
        """Same shape as the student list; a missing active flag counts as active."""
        if field not in SEARCH_FIELDS:
            raise ValueError(f"Cannot search by {field}")

        query = db.query(Teacher)
        if active is True:
            query = query.filter(or_(Teacher.active_status.is_(None), Teacher.active_status.is_(True)))
        elif active is False:
            query = query.filter(Teacher.active_status.is_(False))

        if search and search.strip():
            query = prefix_range(query, SEARCH_FIELDS[field], search)
        else:
            query = query.order_by(Teacher.created_at.desc())

        return paginate_query(query, page=page, page_size=page_size)

    def _check_section(self, db: Session, section_id: Optional[str]) -> None:
        if section_id:
            get_section_or_raise(db, section_id)

    def create_teacher(self, db: Session, teacher_in: schemas.TeacherCreate) -> Teacher:
        values = teacher_in.model_dump()
        employee_id = normalize_human_id(values["employee_id"], "Employee ID")
        require_fields(values, REQUIRED_FIELDS)
        self._check_section(db, values.get("designated_section_id"))
        if self.get_by_employee_id(db, employee_id):
            raise DuplicateError("Employee ID already exists")

        values["employee_id"] = employee_id
        db_teacher = Teacher(**values)
        db.add(db_teacher)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateError("Employee ID already exists")
        db.refresh(db_teacher)
        logger.info(f"Created teacher {db_teacher.employee_id}")
        return db_teacher

    def update_teacher(self, db: Session, employee_id: str, teacher_update: schemas.TeacherUpdate) -> Teacher:
        db_teacher = self.get_or_raise(db, employee_id)
        values = teacher_update.model_dump(exclude_unset=True)
        merged = {field: getattr(db_teacher, field) for field in EDITABLE_REQUIRED_FIELDS}
        merged.update(values)
        require_fields(merged, EDITABLE_REQUIRED_FIELDS)
        self._check_section(db, values.get("designated_section_id"))
        for field, value in values.items():
            setattr(db_teacher, field, value)
        db.commit()
        db.refresh(db_teacher)
        return db_teacher

    def update_own_settings(self, db: Session, employee_id: str, settings_update: schemas.TeacherSelfUpdate) -> Teacher:
        db_teacher = self.get_or_raise(db, employee_id)
        for field, value in settings_update.model_dump(exclude_unset=True).items():
            setattr(db_teacher, field, value)
        db.commit()
        db.refresh(db_teacher)
        return db_teacher

    def delete_teacher(self, db: Session, employee_id: str) -> Teacher:
        """Delete exactly one teacher, matched on the full employee ID."""
        db_teacher = self.get_or_raise(db, employee_id)
        db.delete(db_teacher)
        db.commit()
        logger.info(f"Deleted teacher {db_teacher.employee_id}")
        return db_teacher


teacher_service = TeacherService()
