import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Set

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from registrar.common.listing import Page, contains_text, distinct_values, paginate, total_pages
from registrar.config.school import SEMESTERS
from registrar.enrollments import schemas
from registrar.errors import DuplicateError, InvalidTransitionError, NotFoundError
from registrar.models import (
    Enrollment, Student,
    ENROLLMENT_PENDING, ENROLLMENT_APPROVED, ENROLLMENT_REJECTED,
)
from registrar.sections.crud import get_section_or_raise
from registrar.strands.crud import get_strand_or_raise

logger = logging.getLogger(__name__)

# Decisions are final: nothing goes back to pending or flips between outcomes
ALLOWED_TRANSITIONS: Dict[str, Set[str]] = {
    ENROLLMENT_PENDING: {ENROLLMENT_APPROVED, ENROLLMENT_REJECTED},
    ENROLLMENT_APPROVED: set(),
    ENROLLMENT_REJECTED: set(),
}


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, set())


def duplicate_term_message(semester: str, school_year: str) -> str:
    return (
        f"You have already enrolled for {semester} semester in {school_year}. "
        "Only one enrollment per semester is allowed."
    )


# Columns a pending submission must keep; an explicit null is a bad request
NON_NULL_EDIT_FIELDS = ("strand_id", "semester", "school_year", "is_pwd", "returning_student")


def is_term_conflict(error: IntegrityError) -> bool:
    """True when the integrity error comes from the one-enrollment-per-term constraint."""
    message = str(error.orig).lower()
    return "uq_enrollment_student_term" in message or "unique" in message


def rejection_message(reason: str) -> str:
    return f"{reason.strip().rstrip('.')}. Please resubmit your enrollment."


@dataclass
class EnrollmentFilters:
    status: str = "all"
    school_year: Optional[str] = None
    semester: Optional[str] = None
    search: str = ""

    def matches(self, enrollment: Enrollment) -> bool:
        if self.status != "all" and enrollment.status != self.status:
            return False
        if self.school_year and enrollment.school_year != self.school_year:
            return False
        if self.semester and enrollment.semester != self.semester:
            return False
        return contains_text(enrollment.student_name, self.search)


def filter_enrollments(enrollments: Sequence[Enrollment], filters: EnrollmentFilters) -> List[Enrollment]:
    """Every filter must match; order of the input is kept."""
    return [enrollment for enrollment in enrollments if filters.matches(enrollment)]


@dataclass
class EnrollmentListing:
    page: Page
    school_years: List[str]
    semesters: List[str]


class EnrollmentService:
    def get_or_raise(self, db: Session, enrollment_id: str) -> Enrollment:
        enrollment = db.query(Enrollment).filter(Enrollment.id == enrollment_id).first()
        if not enrollment:
            raise NotFoundError(f"Enrollment {enrollment_id} not found")
        return enrollment

    def term_taken(self, db: Session, student_id: str, semester: str, school_year: str, exclude_id: Optional[str] = None) -> bool:
        query = db.query(Enrollment).filter(
            Enrollment.student_id == student_id,
            Enrollment.semester == semester,
            Enrollment.school_year == school_year,
        )
        if exclude_id:
            query = query.filter(Enrollment.id != exclude_id)
        return db.query(query.exists()).scalar()

    def _check_term(self, semester: str, school_year: str) -> None:
        if semester not in SEMESTERS:
            raise ValueError(f"Semester must be one of: {', '.join(SEMESTERS)}")
        if not (school_year or "").strip():
            raise ValueError("School year is required")

    def submit(self, db: Session, student_id: str, enrollment_in: schemas.EnrollmentCreate) -> Enrollment:
        student = db.query(Student).filter(Student.student_id == student_id).first()
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        self._check_term(enrollment_in.semester, enrollment_in.school_year)
        get_strand_or_raise(db, enrollment_in.strand_id)
        if self.term_taken(db, student.student_id, enrollment_in.semester, enrollment_in.school_year):
            raise DuplicateError(duplicate_term_message(enrollment_in.semester, enrollment_in.school_year))

        db_enrollment = Enrollment(
            **enrollment_in.model_dump(),
            student_id=student.student_id,
            student_name=f"{student.last_name or ''}, {student.first_name or ''}",
            status=ENROLLMENT_PENDING,
        )
        db.add(db_enrollment)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if not is_term_conflict(e):
                raise
            raise DuplicateError(duplicate_term_message(enrollment_in.semester, enrollment_in.school_year))
        db.refresh(db_enrollment)
        logger.info(f"Enrollment submitted by {student.student_id} for {db_enrollment.semester} {db_enrollment.school_year}")
        return db_enrollment

    def update_own(self, db: Session, enrollment_id: str, student_id: str, enrollment_update: schemas.EnrollmentUpdate) -> Enrollment:
        """A student edits their own submission, only while it is still pending."""
        db_enrollment = self.get_or_raise(db, enrollment_id)
        if db_enrollment.student_id != student_id:
            raise NotFoundError(f"Enrollment {enrollment_id} not found")
        if db_enrollment.status != ENROLLMENT_PENDING:
            raise InvalidTransitionError("Only pending enrollments can be edited")

        values = enrollment_update.model_dump(exclude_unset=True)
        blank = [field for field in NON_NULL_EDIT_FIELDS if field in values and values[field] is None]
        if blank:
            raise ValueError(f"These fields cannot be cleared: {', '.join(blank)}")
        semester = values.get("semester", db_enrollment.semester)
        school_year = values.get("school_year", db_enrollment.school_year)
        self._check_term(semester, school_year)
        if values.get("strand_id"):
            get_strand_or_raise(db, values["strand_id"])
        if self.term_taken(db, student_id, semester, school_year, exclude_id=enrollment_id):
            raise DuplicateError(duplicate_term_message(semester, school_year))

        for field, value in values.items():
            setattr(db_enrollment, field, value)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if not is_term_conflict(e):
                raise
            raise DuplicateError(duplicate_term_message(semester, school_year))
        db.refresh(db_enrollment)
        return db_enrollment

    def list_for_student(self, db: Session, student_id: str) -> List[Enrollment]:
        return (
            db.query(Enrollment)
            .filter(Enrollment.student_id == student_id)
            .order_by(Enrollment.created_at.desc())
            .all()
        )

    def list_enrollments(self, db: Session, filters: EnrollmentFilters, page: int = 1, page_size: int = 10) -> EnrollmentListing:
        """
        Newest first, filtered, then sliced.

        A page past the end is clamped to the last page so a narrowed filter
        never leaves the caller on an empty page.
        """
        enrollments = db.query(Enrollment).order_by(Enrollment.created_at.desc()).all()
        filtered = filter_enrollments(enrollments, filters)
        last_page = max(1, total_pages(len(filtered), page_size))
        return EnrollmentListing(
            page=paginate(filtered, page=min(page, last_page), page_size=page_size),
            school_years=sorted(distinct_values(enrollments, lambda e: e.school_year), reverse=True),
            semesters=sorted(distinct_values(enrollments, lambda e: e.semester)),
        )

    def pending_count(self, db: Session) -> int:
        return db.query(Enrollment).filter(Enrollment.status == ENROLLMENT_PENDING).count()

    def _decide(self, db: Session, enrollment: Enrollment, target: str, values: dict) -> int:
        # Conditional update: a concurrent decision on the same row matches nothing
        return (
            db.query(Enrollment)
            .filter(Enrollment.id == enrollment.id, Enrollment.status == ENROLLMENT_PENDING)
            .update({**values, "status": target, "updated_at": datetime.now(timezone.utc)}, synchronize_session=False)
        )

    def approve(self, db: Session, enrollment_id: str, section_id: str, reviewed_by: str) -> Enrollment:
        """
        Approve a pending enrollment and place the student in ``section_id``.

        The enrollment and the student's current-term pointers are written in
        one transaction; either both change or neither does.

        Raises:
            NotFoundError: enrollment, section or student missing.
            InvalidTransitionError: enrollment is no longer pending.
            ValueError: section belongs to a different strand.
        """
        db_enrollment = self.get_or_raise(db, enrollment_id)
        if not can_transition(db_enrollment.status, ENROLLMENT_APPROVED):
            raise InvalidTransitionError(f"Enrollment is already {db_enrollment.status}")
        section = get_section_or_raise(db, section_id)
        if section.strand_id != db_enrollment.strand_id:
            raise ValueError("Section does not belong to the enrollment's strand")
        student = db.query(Student).filter(Student.student_id == db_enrollment.student_id).first()
        if not student:
            raise NotFoundError(f"Student {db_enrollment.student_id} not found")

        try:
            updated = self._decide(db, db_enrollment, ENROLLMENT_APPROVED, {
                "section_id": section.id,
                "reviewed_by": reviewed_by,
                "reviewed_at": datetime.now(timezone.utc),
            })
            if updated == 0:
                db.rollback()
                raise InvalidTransitionError("Enrollment has already been reviewed")

            student.enrolled_for_semester = db_enrollment.semester
            student.enrolled_for_school_year = db_enrollment.school_year
            student.enrolled_for_section_id = section.id
            student.status = "enrolled"
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Failed to approve enrollment {enrollment_id}")
            raise

        db.refresh(db_enrollment)
        logger.info(f"Enrollment {enrollment_id} approved by {reviewed_by}")
        return db_enrollment

    def reject(self, db: Session, enrollment_id: str, reason: str, reviewed_by: str) -> Enrollment:
        if not (reason or "").strip():
            raise ValueError("A rejection reason is required")
        db_enrollment = self.get_or_raise(db, enrollment_id)
        if not can_transition(db_enrollment.status, ENROLLMENT_REJECTED):
            raise InvalidTransitionError(f"Enrollment is already {db_enrollment.status}")

        try:
            updated = self._decide(db, db_enrollment, ENROLLMENT_REJECTED, {
                "rejection_reason": rejection_message(reason),
                "reviewed_by": reviewed_by,
                "reviewed_at": datetime.now(timezone.utc),
            })
            if updated == 0:
                db.rollback()
                raise InvalidTransitionError("Enrollment has already been reviewed")
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Failed to reject enrollment {enrollment_id}")
            raise

        db.refresh(db_enrollment)
        logger.info(f"Enrollment {enrollment_id} rejected by {reviewed_by}")
        return db_enrollment


enrollment_service = EnrollmentService()
