import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Text, JSON, UniqueConstraint, Index
from registrar.database import Base

STUDENT_STATUSES = ("enrolled", "transfer-in", "transfer-out", "incomplete", "graduated")
STUDENT_STATUS_NOT_SET = "not-set"

ENROLLMENT_PENDING = "pending"
ENROLLMENT_APPROVED = "approved"
ENROLLMENT_REJECTED = "rejected"

ROLES = ("admin", "teacher", "student")

SYSTEM_LOG_SUBJECT = "SYSTEM"

EVENT_RECIPIENT_ALL = "all"
EVENT_RECIPIENT_STUDENTS = "students"


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Cross-entity references (strand_id, section_id, student_id...) are plain
# string columns without foreign keys; the human-facing IDs are the join keys.

class Strand(Base):
    __tablename__ = "strands"

    id = Column(String(32), primary_key=True, default=_new_id)
    strand_name = Column(String(100), nullable=False, index=True)
    strand_description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Strand(id={self.id}, name='{self.strand_name}')>"


class Section(Base):
    __tablename__ = "sections"

    id = Column(String(32), primary_key=True, default=_new_id)
    section_name = Column(String(100), nullable=False)
    strand_id = Column(String(32), nullable=False, index=True)
    adviser_id = Column(String(32), nullable=True)
    adviser_name = Column(String(200), nullable=True)
    adviser_email = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        UniqueConstraint("strand_id", "section_name", name="uq_section_strand_name"),
    )

    def __repr__(self):
        return f"<Section(id={self.id}, name='{self.section_name}', strand_id={self.strand_id})>"


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(String(32), primary_key=True, default=_new_id)
    subject_name = Column(String(200), nullable=False, index=True)
    subject_description = Column(Text, nullable=False, default="")
    strand_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class Student(Base):
    __tablename__ = "students"

    id = Column(String(32), primary_key=True, default=_new_id)
    # The human-facing ID doubles as the uniqueness key
    student_id = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), nullable=True)
    first_name = Column(String(100), nullable=True, index=True)
    middle_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True, index=True)
    suffix = Column(String(20), nullable=True)
    sex = Column(String(20), nullable=True)
    birth_date = Column(String(20), nullable=True)
    birth_place = Column(String(200), nullable=True)
    civil_status = Column(String(50), nullable=True)
    nationality = Column(String(100), nullable=True)
    religion = Column(String(100), nullable=True)
    mother_tongue = Column(String(100), nullable=True)
    contact_number = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    father_name = Column(String(200), nullable=True)
    father_occupation = Column(String(100), nullable=True)
    father_contact_number = Column(String(50), nullable=True)
    mother_name = Column(String(200), nullable=True)
    mother_occupation = Column(String(100), nullable=True)
    mother_contact_number = Column(String(50), nullable=True)
    guardian_name = Column(String(200), nullable=True)
    guardian_occupation = Column(String(100), nullable=True)
    guardian_contact_number = Column(String(50), nullable=True)
    status = Column(String(20), nullable=True, index=True)
    enrolled_for_section_id = Column(String(32), nullable=True, index=True)
    enrolled_for_semester = Column(String(10), nullable=True)
    enrolled_for_school_year = Column(String(20), nullable=True)
    profile_complete = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self):
        return f"<Student(id={self.id}, student_id='{self.student_id}', status={self.status})>"


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(String(32), primary_key=True, default=_new_id)
    employee_id = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), nullable=True)
    first_name = Column(String(100), nullable=True, index=True)
    middle_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True, index=True)
    contact_number = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    designated_section_id = Column(String(32), nullable=True)
    # NULL reads as active
    active_status = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    @property
    def is_active(self) -> bool:
        return self.active_status is not False

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Enrollment(Base):
    __tablename__ = "enrollment"

    id = Column(String(32), primary_key=True, default=_new_id)
    student_id = Column(String(50), nullable=False, index=True)
    student_name = Column(String(255), nullable=False, default="")
    strand_id = Column(String(32), nullable=False)
    grade_level = Column(String(10), nullable=True)
    semester = Column(String(10), nullable=False)
    school_year = Column(String(20), nullable=False, index=True)
    clearance = Column(Text, nullable=True)
    copy_of_grades = Column(Text, nullable=True)
    is_pwd = Column(Boolean, nullable=False, default=False)
    returning_student = Column(Boolean, nullable=False, default=False)
    last_grade_level = Column(String(10), nullable=True)
    last_school_attended = Column(String(255), nullable=True)
    last_school_year = Column(String(20), nullable=True)
    status = Column(String(20), nullable=False, default=ENROLLMENT_PENDING, index=True)
    section_id = Column(String(32), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    reviewed_by = Column(String(255), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        UniqueConstraint("student_id", "semester", "school_year", name="uq_enrollment_student_term"),
    )

    def __repr__(self):
        return f"<Enrollment(id={self.id}, student_id='{self.student_id}', status={self.status})>"


class SubjectRecord(Base):
    __tablename__ = "subject-record"

    id = Column(String(32), primary_key=True, default=_new_id)
    section_id = Column(String(32), nullable=False, index=True)
    section_name = Column(String(100), nullable=False, default="")
    subject_id = Column(String(32), nullable=False)
    subject_name = Column(String(200), nullable=False, default="")
    grade_level = Column(String(10), nullable=True)
    semester = Column(String(10), nullable=False)
    time_slot = Column(String(100), nullable=True)
    school_year = Column(String(20), nullable=False, index=True)
    teacher_id = Column(String(50), nullable=True, index=True)
    teacher_name = Column(String(255), nullable=True)
    # Denormalised aggregate: grade updates rewrite the whole array
    student_list = Column(JSON, nullable=False, default=list)
    student_grades = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __mapper_args__ = {"version_id_col": version}


class AuditLog(Base):
    __tablename__ = "logs"

    id = Column(String(32), primary_key=True, default=_new_id)
    student_id = Column(String(50), nullable=False, default=SYSTEM_LOG_SUBJECT, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    logs_by = Column(String(255), nullable=False)
    date = Column(DateTime(timezone=True), default=_utcnow, index=True)


class CalendarEvent(Base):
    __tablename__ = "events"

    id = Column(String(32), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    recipient = Column(String(20), nullable=False, default=EVENT_RECIPIENT_ALL)
    created_by = Column(String(20), nullable=False)
    teacher_id = Column(String(50), nullable=True, index=True)
    from_teacher = Column(String(255), nullable=True)
    subject_record_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<CalendarEvent(id={self.id}, title='{self.title}', start={self.start_date})>"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(32), primary_key=True, default=_new_id)
    student_id = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(32), primary_key=True, default=_new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    display_name = Column(String(255), nullable=False, default="")
    student_id = Column(String(50), nullable=True)
    teacher_id = Column(String(50), nullable=True)
    session_token = Column(String(64), nullable=True, unique=True)
    session_expires_at = Column(DateTime(timezone=True), nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("idx_accounts_role", "role"),
    )
