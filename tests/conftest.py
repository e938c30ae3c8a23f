import os

# Settings are read at import time, so the test environment goes in first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "development"
os.environ["SIDE_EFFECT_RETRY_DELAY_SECONDS"] = "0"
os.environ["BOOTSTRAP_ADMIN_EMAIL"] = ""
os.environ["BOOTSTRAP_ADMIN_PASSWORD"] = ""
os.environ["DOCUMENTS_BUCKET"] = ""

import pytest
from fastapi.testclient import TestClient

from registrar.auth.schemas import AccountCreate
from registrar.auth.service import auth_service
from registrar.database import Base, SessionLocal, engine
from registrar.main import create_app
from registrar.sections.crud import create_section
from registrar.sections.schemas import SectionCreate
from registrar.strands.crud import create_strand
from registrar.strands.schemas import StrandCreate
from registrar.students.schemas import StudentCreate
from registrar.students.service import student_service
from registrar.teachers.schemas import TeacherCreate
from registrar.teachers.service import teacher_service

PASSWORD = "correct-horse"


@pytest.fixture()
def db():
    """A fresh schema per test on the shared in-memory database."""
    from registrar import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def app(db):
    return create_app()


@pytest.fixture()
def client(app):
    return TestClient(app)


def login_headers(db, email: str) -> dict:
    _, token = auth_service.login(db, email, PASSWORD)
    return {"Authorization": f"Bearer {token}"}


def _create_student(db, student_id: str = "STU-001", **overrides):
    values = {
        "student_id": student_id,
        "first_name": "Juan",
        "middle_name": "Santos",
        "last_name": "Dela Cruz",
        "sex": "Male",
        "birth_date": "2008-05-14",
        "address": "Quezon City",
    }
    values.update(overrides)
    return student_service.create_student(db, StudentCreate(**values))


@pytest.fixture()
def make_student(db):
    """Factory for extra students; keyword overrides replace the defaults."""
    def _make(student_id, **overrides):
        return _create_student(db, student_id, **overrides)
    return _make


@pytest.fixture()
def admin_headers(db):
    auth_service.create_account(db, AccountCreate(email="admin@school.test", password=PASSWORD, role="admin", display_name="Registrar Admin"))
    return login_headers(db, "admin@school.test")


@pytest.fixture()
def student(db):
    return _create_student(db)


@pytest.fixture()
def student_headers(db, student):
    auth_service.create_account(db, AccountCreate(email="juan@school.test", password=PASSWORD, role="student", student_id=student.student_id))
    return login_headers(db, "juan@school.test")


@pytest.fixture()
def teacher(db):
    return teacher_service.create_teacher(db, TeacherCreate(
        employee_id="EMP-100",
        first_name="Maria",
        last_name="Reyes",
        email="maria@school.test",
    ))


@pytest.fixture()
def teacher_headers(db, teacher):
    auth_service.create_account(db, AccountCreate(email="maria@school.test", password=PASSWORD, role="teacher", teacher_id=teacher.employee_id))
    return login_headers(db, "maria@school.test")


@pytest.fixture()
def strand(db):
    return create_strand(db, StrandCreate(strand_name="STEM", strand_description="Science, Technology, Engineering and Mathematics"))


@pytest.fixture()
def section(db, strand):
    return create_section(db, SectionCreate(section_name="STEM-A", strand_id=strand.id))
