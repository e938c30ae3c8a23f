from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from registrar.audit_logs.service import log_service, record_log
from registrar.auth.dependencies import SessionContext, require_admin, require_role, require_staff
from registrar.common.schemas import PageResponse
from registrar.config.settings import settings
from registrar.database import get_db
from registrar.errors import to_http_exception, NotFoundError
from registrar.teachers import schemas
from registrar.teachers.service import teacher_service

router = APIRouter(
    prefix="/api/teachers",
    tags=["teachers"],
)

require_teacher = require_role("teacher")


def _own_employee_id(session: SessionContext) -> str:
    if not session.teacher_id:
        raise HTTPException(status_code=403, detail="This account is not linked to a teacher record")
    return session.teacher_id


@router.get("", response_model=PageResponse[schemas.TeacherResponse])
def list_teachers(
    search: Optional[str] = Query(None, description="Prefix to search for"),
    field: schemas.TeacherSearchField = Query("employee_id"),
    active: Optional[bool] = Query(None, description="Filter on active status; unset counts as active"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    try:
        result = teacher_service.list_teachers(db, search=search, field=field, active=active, page=page, page_size=page_size)
    except ValueError as e:
        raise to_http_exception(e)
    items = [schemas.TeacherResponse.model_validate(t) for t in result.items]
    return PageResponse[schemas.TeacherResponse].from_page(result, items, search=search, field=field)


@router.get("/me", response_model=schemas.TeacherResponse)
def read_own_record(db: Session = Depends(get_db), session: SessionContext = Depends(require_teacher)):
    try:
        return teacher_service.get_or_raise(db, _own_employee_id(session))
    except NotFoundError as e:
        raise to_http_exception(e)


@router.put("/me", response_model=schemas.TeacherResponse)
def update_own_record(
    settings_update: schemas.TeacherSelfUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_teacher),
):
    try:
        return teacher_service.update_own_settings(db, _own_employee_id(session), settings_update)
    except NotFoundError as e:
        raise to_http_exception(e)


@router.get("/{employee_id}", response_model=schemas.TeacherResponse)
def get_teacher(employee_id: str, db: Session = Depends(get_db), session: SessionContext = Depends(require_staff)):
    try:
        return teacher_service.get_or_raise(db, employee_id)
    except NotFoundError as e:
        raise to_http_exception(e)


@router.post("", response_model=schemas.TeacherResponse, status_code=status.HTTP_201_CREATED)
def create_teacher(
    teacher_in: schemas.TeacherCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_teacher = teacher_service.create_teacher(db, teacher_in)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.teacher_added(db_teacher.full_name, session.display_name))
    return db_teacher


@router.put("/{employee_id}", response_model=schemas.TeacherResponse)
def update_teacher(
    employee_id: str,
    teacher_update: schemas.TeacherUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_teacher = teacher_service.update_teacher(db, employee_id, teacher_update)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.teacher_updated(db_teacher.full_name, session.display_name))
    return db_teacher


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_teacher(
    employee_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_teacher = teacher_service.delete_teacher(db, employee_id)
    except NotFoundError as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.teacher_deleted(db_teacher.full_name, session.display_name))
