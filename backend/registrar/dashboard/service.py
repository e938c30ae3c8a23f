from collections import Counter

from sqlalchemy import or_
from sqlalchemy.orm import Session

from registrar.dashboard import schemas
from registrar.models import (
    Enrollment, Section, Strand, Student, Teacher,
    ENROLLMENT_APPROVED, ENROLLMENT_PENDING, STUDENT_STATUSES,
)


def get_summary(db: Session) -> schemas.DashboardSummary:
    return schemas.DashboardSummary(
        students=db.query(Student).count(),
        teachers=db.query(Teacher).count(),
        strands=db.query(Strand).count(),
        sections=db.query(Section).count(),
        pending_enrollments=db.query(Enrollment).filter(Enrollment.status == ENROLLMENT_PENDING).count(),
        students_without_status=db.query(Student).filter(
            or_(Student.status.is_(None), Student.status.notin_(STUDENT_STATUSES))
        ).count(),
    )


def get_enrollment_report(db: Session, school_year: str) -> schemas.EnrollmentReport:
    """Approved enrollments for one school year, grouped by strand and by semester."""
    approved = db.query(Enrollment).filter(
        Enrollment.school_year == school_year,
        Enrollment.status == ENROLLMENT_APPROVED,
    ).all()
    strand_names = {strand.id: strand.strand_name for strand in db.query(Strand).all()}

    per_strand = Counter(enrollment.strand_id for enrollment in approved)
    per_semester = Counter(enrollment.semester for enrollment in approved)

    return schemas.EnrollmentReport(
        school_year=school_year,
        enrolled_students=db.query(Student).filter(
            Student.enrolled_for_school_year == school_year,
            Student.status == "enrolled",
        ).count(),
        approved_enrollments=len(approved),
        by_strand=[
            schemas.StrandCount(strand_id=strand_id, strand_name=strand_names.get(strand_id, "Unknown strand"), approved=count)
            for strand_id, count in sorted(per_strand.items(), key=lambda item: strand_names.get(item[0], ""))
        ],
        by_semester=dict(sorted(per_semester.items())),
    )
