"""create registrar tables

Revision ID: 4e1a7c2d9b30
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4e1a7c2d9b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'strands',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('strand_name', sa.String(length=100), nullable=False),
        sa.Column('strand_description', sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_strands_strand_name'), 'strands', ['strand_name'], unique=False)

    op.create_table(
        'sections',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('section_name', sa.String(length=100), nullable=False),
        sa.Column('strand_id', sa.String(length=32), nullable=False),
        sa.Column('adviser_id', sa.String(length=32), nullable=True),
        sa.Column('adviser_name', sa.String(length=200), nullable=True),
        sa.Column('adviser_email', sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('strand_id', 'section_name', name='uq_section_strand_name'),
    )
    op.create_index(op.f('ix_sections_strand_id'), 'sections', ['strand_id'], unique=False)

    op.create_table(
        'subjects',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('subject_name', sa.String(length=200), nullable=False),
        sa.Column('subject_description', sa.Text(), nullable=False),
        sa.Column('strand_ids', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_subjects_subject_name'), 'subjects', ['subject_name'], unique=False)

    op.create_table(
        'students',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('student_id', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('middle_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('suffix', sa.String(length=20), nullable=True),
        sa.Column('sex', sa.String(length=20), nullable=True),
        sa.Column('birth_date', sa.String(length=20), nullable=True),
        sa.Column('birth_place', sa.String(length=200), nullable=True),
        sa.Column('civil_status', sa.String(length=50), nullable=True),
        sa.Column('nationality', sa.String(length=100), nullable=True),
        sa.Column('religion', sa.String(length=100), nullable=True),
        sa.Column('mother_tongue', sa.String(length=100), nullable=True),
        sa.Column('contact_number', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('father_name', sa.String(length=200), nullable=True),
        sa.Column('father_occupation', sa.String(length=100), nullable=True),
        sa.Column('father_contact_number', sa.String(length=50), nullable=True),
        sa.Column('mother_name', sa.String(length=200), nullable=True),
        sa.Column('mother_occupation', sa.String(length=100), nullable=True),
        sa.Column('mother_contact_number', sa.String(length=50), nullable=True),
        sa.Column('guardian_name', sa.String(length=200), nullable=True),
        sa.Column('guardian_occupation', sa.String(length=100), nullable=True),
        sa.Column('guardian_contact_number', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('enrolled_for_section_id', sa.String(length=32), nullable=True),
        sa.Column('enrolled_for_semester', sa.String(length=10), nullable=True),
        sa.Column('enrolled_for_school_year', sa.String(length=20), nullable=True),
        sa.Column('profile_complete', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_students_student_id'), 'students', ['student_id'], unique=True)
    op.create_index(op.f('ix_students_first_name'), 'students', ['first_name'], unique=False)
    op.create_index(op.f('ix_students_last_name'), 'students', ['last_name'], unique=False)
    op.create_index(op.f('ix_students_status'), 'students', ['status'], unique=False)
    op.create_index(op.f('ix_students_enrolled_for_section_id'), 'students', ['enrolled_for_section_id'], unique=False)
    op.create_index(op.f('ix_students_created_at'), 'students', ['created_at'], unique=False)

    op.create_table(
        'teachers',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('employee_id', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('middle_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('contact_number', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('designated_section_id', sa.String(length=32), nullable=True),
        sa.Column('active_status', sa.Boolean(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_teachers_employee_id'), 'teachers', ['employee_id'], unique=True)
    op.create_index(op.f('ix_teachers_first_name'), 'teachers', ['first_name'], unique=False)
    op.create_index(op.f('ix_teachers_last_name'), 'teachers', ['last_name'], unique=False)
    op.create_index(op.f('ix_teachers_created_at'), 'teachers', ['created_at'], unique=False)

    op.create_table(
        'enrollment',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('student_id', sa.String(length=50), nullable=False),
        sa.Column('student_name', sa.String(length=255), nullable=False),
        sa.Column('strand_id', sa.String(length=32), nullable=False),
        sa.Column('grade_level', sa.String(length=10), nullable=True),
        sa.Column('semester', sa.String(length=10), nullable=False),
        sa.Column('school_year', sa.String(length=20), nullable=False),
        sa.Column('clearance', sa.Text(), nullable=True),
        sa.Column('copy_of_grades', sa.Text(), nullable=True),
        sa.Column('is_pwd', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('returning_student', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_grade_level', sa.String(length=10), nullable=True),
        sa.Column('last_school_attended', sa.String(length=255), nullable=True),
        sa.Column('last_school_year', sa.String(length=20), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('section_id', sa.String(length=32), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.String(length=255), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'semester', 'school_year', name='uq_enrollment_student_term'),
    )
    op.create_index(op.f('ix_enrollment_student_id'), 'enrollment', ['student_id'], unique=False)
    op.create_index(op.f('ix_enrollment_school_year'), 'enrollment', ['school_year'], unique=False)
    op.create_index(op.f('ix_enrollment_status'), 'enrollment', ['status'], unique=False)
    op.create_index(op.f('ix_enrollment_created_at'), 'enrollment', ['created_at'], unique=False)

    op.create_table(
        'subject-record',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('section_id', sa.String(length=32), nullable=False),
        sa.Column('section_name', sa.String(length=100), nullable=False),
        sa.Column('subject_id', sa.String(length=32), nullable=False),
        sa.Column('subject_name', sa.String(length=200), nullable=False),
        sa.Column('grade_level', sa.String(length=10), nullable=True),
        sa.Column('semester', sa.String(length=10), nullable=False),
        sa.Column('time_slot', sa.String(length=100), nullable=True),
        sa.Column('school_year', sa.String(length=20), nullable=False),
        sa.Column('teacher_id', sa.String(length=50), nullable=True),
        sa.Column('teacher_name', sa.String(length=255), nullable=True),
        sa.Column('student_list', sa.JSON(), nullable=False),
        sa.Column('student_grades', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_subject-record_section_id'), 'subject-record', ['section_id'], unique=False)
    op.create_index(op.f('ix_subject-record_school_year'), 'subject-record', ['school_year'], unique=False)
    op.create_index(op.f('ix_subject-record_teacher_id'), 'subject-record', ['teacher_id'], unique=False)
    op.create_index(op.f('ix_subject-record_created_at'), 'subject-record', ['created_at'], unique=False)

    op.create_table(
        'logs',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('student_id', sa.String(length=50), nullable=False, server_default='SYSTEM'),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('logs_by', sa.String(length=255), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_logs_student_id'), 'logs', ['student_id'], unique=False)
    op.create_index(op.f('ix_logs_date'), 'logs', ['date'], unique=False)

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('student_id', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_notifications_student_id'), 'notifications', ['student_id'], unique=False)
    op.create_index(op.f('ix_notifications_created_at'), 'notifications', ['created_at'], unique=False)

    op.create_table(
        'accounts',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('student_id', sa.String(length=50), nullable=True),
        sa.Column('teacher_id', sa.String(length=50), nullable=True),
        sa.Column('session_token', sa.String(length=64), nullable=True),
        sa.Column('session_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_token'),
    )
    op.create_index(op.f('ix_accounts_email'), 'accounts', ['email'], unique=True)
    op.create_index('idx_accounts_role', 'accounts', ['role'], unique=False)


def downgrade() -> None:
    for table in ('accounts', 'notifications', 'logs', 'subject-record', 'enrollment', 'teachers', 'students', 'subjects', 'sections', 'strands'):
        op.drop_table(table)
