import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from registrar.audit_logs.service import LogEntry, log_service
from registrar.common.listing import Page, paginate_query
from registrar.common.validation import require_fields
from registrar.config.school import SEMESTERS, default_school_year
from registrar.errors import NotFoundError, StaleRecordError
from registrar.models import Section, Student, SubjectRecord, Subject, Teacher
from registrar.subject_records import schemas

logger = logging.getLogger(__name__)

MIN_GRADE = 60
MAX_GRADE = 100
HONOR_THRESHOLD = 90


def final_grade(first_quarter: int, second_quarter: int) -> int:
    """Mean of the two quarters, halves rounded up; 0 until both are in."""
    if first_quarter > 0 and second_quarter > 0:
        return (first_quarter + second_quarter + 1) // 2
    return 0


def honor_rating(grade: float) -> str:
    if grade >= 98:
        return "With Highest Honors"
    if grade >= 95:
        return "With High Honors"
    if grade >= HONOR_THRESHOLD:
        return "With Honors"
    return ""


def check_quarter_grade(value: Optional[int], label: str) -> int:
    if not value:
        return 0
    if value < MIN_GRADE or value > MAX_GRADE:
        raise ValueError(f"{label} must be between {MIN_GRADE} and {MAX_GRADE}")
    return value


def _locked(label: str, current: Any, incoming: Any) -> Any:
    # Submitted values stay as they are
    if current and incoming and incoming != current:
        raise ValueError(f"{label} has already been submitted and cannot be changed")
    return current or incoming


def merge_grade(existing: Optional[Dict[str, Any]], grade_in: schemas.GradeInput, student_name: str) -> Dict[str, Any]:
    """Apply one grade input on top of the stored row and recompute the derived fields."""
    existing = existing or {}
    first = _locked(
        "First quarter grade",
        existing.get("first_quarter_grade", 0),
        check_quarter_grade(grade_in.first_quarter_grade, "First quarter grade"),
    )
    second = _locked(
        "Second quarter grade",
        existing.get("second_quarter_grade", 0),
        check_quarter_grade(grade_in.second_quarter_grade, "Second quarter grade"),
    )
    remarks = _locked("Remarks", existing.get("remarks", ""), (grade_in.remarks or "").strip())
    final = final_grade(first, second)
    return {
        "student_id": grade_in.student_id,
        "student_name": existing.get("student_name") or student_name,
        "first_quarter_grade": first,
        "second_quarter_grade": second,
        "final_grade": final,
        "rating": honor_rating(final) if final else "",
        "remarks": remarks,
    }


def average_grade(grades: List[int]) -> float:
    if not grades:
        return 0.0
    mean = Decimal(sum(grades)) / Decimal(len(grades))
    return float(mean.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@dataclass
class RecordFilters:
    teacher_id: Optional[str] = None
    school_year: Optional[str] = None
    section_id: Optional[str] = None
    semester: Optional[str] = None


class SubjectRecordService:
    def get_or_raise(self, db: Session, record_id: str) -> SubjectRecord:
        record = db.query(SubjectRecord).filter(SubjectRecord.id == record_id).first()
        if not record:
            raise NotFoundError(f"Subject record {record_id} not found")
        return record

    def list_records(self, db: Session, filters: RecordFilters, page: int = 1, page_size: int = 10) -> Page:
        query = db.query(SubjectRecord)
        if filters.teacher_id:
            query = query.filter(SubjectRecord.teacher_id == filters.teacher_id)
        if filters.school_year:
            query = query.filter(SubjectRecord.school_year == filters.school_year)
        if filters.section_id:
            query = query.filter(SubjectRecord.section_id == filters.section_id)
        if filters.semester:
            query = query.filter(SubjectRecord.semester == filters.semester)
        return paginate_query(query.order_by(SubjectRecord.created_at.desc()), page=page, page_size=page_size)

    def _apply_references(self, db: Session, record: SubjectRecord, values: Dict[str, Any]) -> None:
        """Resolve section/subject/teacher IDs and copy their display names onto the record."""
        if values.get("section_id"):
            section = db.query(Section).filter(Section.id == values["section_id"]).first()
            if not section:
                raise NotFoundError(f"Section {values['section_id']} not found")
            record.section_id = section.id
            record.section_name = section.section_name
        if values.get("subject_id"):
            subject = db.query(Subject).filter(Subject.id == values["subject_id"]).first()
            if not subject:
                raise NotFoundError(f"Subject {values['subject_id']} not found")
            record.subject_id = subject.id
            record.subject_name = subject.subject_name
        if values.get("teacher_id"):
            teacher = db.query(Teacher).filter(Teacher.employee_id == values["teacher_id"].strip().upper()).first()
            if not teacher:
                raise NotFoundError(f"Teacher {values['teacher_id']} not found")
            record.teacher_id = teacher.employee_id
            record.teacher_name = teacher.full_name
        if values.get("semester") is not None:
            if values["semester"] not in SEMESTERS:
                raise ValueError(f"Semester must be one of: {', '.join(SEMESTERS)}")
            record.semester = values["semester"]
        for field in ("school_year", "grade_level", "time_slot"):
            if values.get(field) is not None:
                setattr(record, field, values[field])

    def create_record(self, db: Session, record_in: schemas.SubjectRecordCreate) -> SubjectRecord:
        values = record_in.model_dump()
        require_fields(values, ("section_id", "subject_id"))
        values["school_year"] = values.get("school_year") or default_school_year()
        record = SubjectRecord(student_list=[], student_grades=[])
        self._apply_references(db, record, values)
        db.add(record)
        db.commit()
        db.refresh(record)
        logger.info(f"Created subject record {record.id} ({record.subject_name}, {record.section_name})")
        return record

    def update_record(self, db: Session, record_id: str, record_update: schemas.SubjectRecordUpdate) -> SubjectRecord:
        record = self.get_or_raise(db, record_id)
        self._apply_references(db, record, record_update.model_dump(exclude_unset=True))
        self._commit_versioned(db, record)
        return record

    def delete_record(self, db: Session, record_id: str) -> SubjectRecord:
        record = self.get_or_raise(db, record_id)
        db.delete(record)
        self._commit_versioned(db, record, refresh=False)
        return record

    def _commit_versioned(self, db: Session, record: SubjectRecord, refresh: bool = True) -> None:
        try:
            db.commit()
        except StaleDataError:
            db.rollback()
            raise StaleRecordError("This record was changed by someone else. Reload and try again.")
        if refresh:
            db.refresh(record)

    def add_students(self, db: Session, record_id: str, student_ids: List[str]) -> SubjectRecord:
        record = self.get_or_raise(db, record_id)
        roster = list(record.student_list or [])
        for student_id in student_ids:
            key = student_id.strip().upper()
            if not db.query(Student).filter(Student.student_id == key).first():
                raise NotFoundError(f"Student {student_id} not found")
            if key not in roster:
                roster.append(key)
        record.student_list = roster
        self._commit_versioned(db, record)
        return record

    def remove_students(self, db: Session, record_id: str, student_ids: List[str]) -> SubjectRecord:
        """Drop students from the roster along with their grade rows."""
        record = self.get_or_raise(db, record_id)
        keys = {student_id.strip().upper() for student_id in student_ids}
        record.student_list = [sid for sid in (record.student_list or []) if sid not in keys]
        record.student_grades = [g for g in (record.student_grades or []) if g.get("student_id") not in keys]
        self._commit_versioned(db, record)
        return record

    def update_grades(
        self,
        db: Session,
        record_id: str,
        grades_update: schemas.GradesUpdate,
        performed_by: str,
    ) -> Tuple[SubjectRecord, List[LogEntry]]:
        """
        Merge submitted grades into the record's grade sheet.

        The whole ``student_grades`` array is rewritten in one versioned
        update. Returns the record and one audit entry per final grade that
        was added or changed.

        Raises:
            StaleRecordError: ``expected_version`` does not match, or another
                write landed first.
            ValueError: grade out of range, locked field changed, or student
                not on the roster.
        """
        record = self.get_or_raise(db, record_id)
        if grades_update.expected_version is not None and grades_update.expected_version != record.version:
            raise StaleRecordError("This record was changed by someone else. Reload and try again.")

        roster = set(record.student_list or [])
        sheet = {g["student_id"]: g for g in (record.student_grades or [])}
        names = {
            s.student_id: s.full_name
            for s in db.query(Student).filter(Student.student_id.in_(list(roster))).all()
        } if roster else {}

        entries: List[LogEntry] = []
        for grade_in in grades_update.grades:
            grade_in.student_id = grade_in.student_id.strip().upper()
            if grade_in.student_id not in roster:
                raise ValueError(f"Student {grade_in.student_id} is not in this class")
            previous = sheet.get(grade_in.student_id)
            merged = merge_grade(previous, grade_in, names.get(grade_in.student_id, ""))
            sheet[grade_in.student_id] = merged

            previous_final = (previous or {}).get("final_grade", 0)
            if merged["final_grade"] and merged["final_grade"] != previous_final:
                build = log_service.grade_updated if previous_final else log_service.grade_added
                entries.append(build(merged["student_id"], merged["student_name"], record.subject_name, merged["final_grade"], performed_by))

        record.student_grades = list(sheet.values())
        self._commit_versioned(db, record)
        return record, entries

    def records_for_student(self, db: Session, student_id: str) -> List[SubjectRecord]:
        key = student_id.strip().upper()
        records = db.query(SubjectRecord).order_by(SubjectRecord.created_at.desc()).all()
        return [record for record in records if key in (record.student_list or [])]

    def grades_for_student(
        self,
        db: Session,
        student_id: str,
        school_year: Optional[str] = None,
        semester: Optional[str] = None,
    ) -> List[schemas.StudentGradeView]:
        key = student_id.strip().upper()
        views = []
        for record in self.records_for_student(db, key):
            if school_year and record.school_year != school_year:
                continue
            if semester and record.semester != semester:
                continue
            grade = next((g for g in (record.student_grades or []) if g.get("student_id") == key), None)
            views.append(schemas.StudentGradeView(
                **(grade or {"student_id": key}),
                subject_record_id=record.id,
                subject_name=record.subject_name,
                section_name=record.section_name,
                semester=record.semester,
                school_year=record.school_year,
                teacher_name=record.teacher_name,
            ))
        return views

    def honor_roll(self, db: Session, section_id: str, school_year: str, semester: str) -> List[schemas.HonorRollEntry]:
        """
        Students placed in ``section_id`` for the term whose average final
        grade across the section's records is at least 90, best first.
        """
        students = (
            db.query(Student)
            .filter(
                Student.enrolled_for_section_id == section_id,
                Student.enrolled_for_school_year == school_year,
                Student.enrolled_for_semester == semester,
            )
            .order_by(Student.last_name.asc())
            .all()
        )
        records = db.query(SubjectRecord).filter(
            SubjectRecord.section_id == section_id,
            SubjectRecord.school_year == school_year,
            SubjectRecord.semester == semester,
        ).all()

        honor_roll = []
        for student in students:
            finals = [
                g["final_grade"]
                for record in records
                for g in (record.student_grades or [])
                if g.get("student_id") == student.student_id and g.get("final_grade", 0) > 0
            ]
            average = average_grade(finals)
            if finals and average >= HONOR_THRESHOLD:
                honor_roll.append(schemas.HonorRollEntry(
                    student_id=student.student_id,
                    student_name=f"{student.last_name or ''}, {student.first_name or ''}",
                    average_grade=average,
                    total_subjects=len(finals),
                    honor_distinction=honor_rating(average),
                ))
        return sorted(honor_roll, key=lambda entry: entry.average_grade, reverse=True)


subject_record_service = SubjectRecordService()
