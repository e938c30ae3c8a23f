import logging
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from registrar.audit_logs.service import log_service, record_log
from registrar.auth.dependencies import SessionContext, require_admin, require_staff, require_student
from registrar.common.schemas import PageResponse
from registrar.config.settings import settings
from registrar.database import get_db
from registrar.errors import to_http_exception, NotFoundError
from registrar.students import schemas
from registrar.students.service import student_service
from registrar.subject_records.schemas import StudentGradeView
from registrar.subject_records.service import subject_record_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/students",
    tags=["students"],
)


def _own_student_id(session: SessionContext) -> str:
    if not session.student_id:
        raise HTTPException(status_code=403, detail="This account is not linked to a student record")
    return session.student_id


@router.get("", response_model=PageResponse[schemas.StudentResponse])
def list_students(
    search: Optional[str] = Query(None, description="Prefix to search for"),
    field: schemas.StudentSearchField = Query("student_id", description="Field the search applies to"),
    status_filter: Optional[schemas.StudentStatusFilter] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    try:
        result = student_service.list_students(db, search=search, field=field, status=status_filter, page=page, page_size=page_size)
    except ValueError as e:
        raise to_http_exception(e)
    items = [schemas.StudentResponse.model_validate(s) for s in result.items]
    return PageResponse[schemas.StudentResponse].from_page(result, items, search=search, field=field)


@router.get("/me", response_model=schemas.StudentResponse)
def read_own_record(db: Session = Depends(get_db), session: SessionContext = Depends(require_student)):
    try:
        return student_service.get_or_raise(db, _own_student_id(session))
    except NotFoundError as e:
        raise to_http_exception(e)


@router.put("/me", response_model=schemas.StudentResponse)
def update_own_record(
    profile_update: schemas.StudentSelfUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_student),
):
    """Self-service settings: contact and family fields only."""
    try:
        return student_service.update_own_profile(db, _own_student_id(session), profile_update)
    except NotFoundError as e:
        raise to_http_exception(e)


@router.get("/me/grades", response_model=List[StudentGradeView])
def read_own_grades(
    school_year: Optional[str] = Query(None),
    semester: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_student),
):
    return subject_record_service.grades_for_student(db, _own_student_id(session), school_year=school_year, semester=semester)


@router.get("/{student_id}", response_model=schemas.StudentResponse)
def get_student(student_id: str, db: Session = Depends(get_db), session: SessionContext = Depends(require_staff)):
    try:
        return student_service.get_or_raise(db, student_id)
    except NotFoundError as e:
        raise to_http_exception(e)


@router.post("", response_model=schemas.StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    student_in: schemas.StudentCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_student = student_service.create_student(db, student_in)
    except ValueError as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.student_added(db_student.student_id, db_student.full_name, session.display_name))
    return db_student


@router.put("/{student_id}", response_model=schemas.StudentResponse)
def update_student(
    student_id: str,
    student_update: schemas.StudentUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_student = student_service.update_student(db, student_id, student_update)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.student_updated(db_student.student_id, db_student.full_name, session.display_name))
    return db_student


@router.patch("/{student_id}/status", response_model=schemas.StudentResponse)
def update_student_status(
    student_id: str,
    status_update: schemas.StudentStatusUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    try:
        db_student = student_service.set_status(db, student_id, status_update.status)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.student_updated(db_student.student_id, db_student.full_name, session.display_name))
    return db_student


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    student_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_student = student_service.delete_student(db, student_id)
    except NotFoundError as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.student_deleted(db_student.student_id, db_student.full_name, session.display_name))
