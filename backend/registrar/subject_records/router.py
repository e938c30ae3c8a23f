from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from registrar.audit_logs.service import log_service, record_log
from registrar.auth.dependencies import SessionContext, require_admin, require_staff
from registrar.common.schemas import PageResponse
from registrar.config.settings import settings
from registrar.database import get_db
from registrar.errors import to_http_exception, NotFoundError
from registrar.models import SubjectRecord
from registrar.subject_records import schemas
from registrar.subject_records.service import RecordFilters, subject_record_service

router = APIRouter(
    prefix="/api/subject-records",
    tags=["subject-records"],
)


def _owned_record(db: Session, record_id: str, session: SessionContext) -> SubjectRecord:
    """Admins reach any record; teachers only the classes assigned to them."""
    try:
        record = subject_record_service.get_or_raise(db, record_id)
    except NotFoundError as e:
        raise to_http_exception(e)
    if not session.is_admin and record.teacher_id != session.teacher_id:
        raise HTTPException(status_code=403, detail="Forbidden: this class is assigned to another teacher")
    return record


@router.get("", response_model=PageResponse[schemas.SubjectRecordResponse])
def list_subject_records(
    teacher_id: Optional[str] = Query(None),
    school_year: Optional[str] = Query(None),
    section_id: Optional[str] = Query(None),
    semester: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    if not session.is_admin:
        teacher_id = session.teacher_id
    filters = RecordFilters(teacher_id=teacher_id, school_year=school_year, section_id=section_id, semester=semester)
    result = subject_record_service.list_records(db, filters, page=page, page_size=page_size)
    items = [schemas.SubjectRecordResponse.model_validate(r) for r in result.items]
    return PageResponse[schemas.SubjectRecordResponse].from_page(result, items)


@router.get("/honor-roll", response_model=List[schemas.HonorRollEntry])
def honor_roll(
    section_id: str = Query(...),
    school_year: str = Query(...),
    semester: str = Query(...),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    return subject_record_service.honor_roll(db, section_id, school_year, semester)


@router.get("/{record_id}", response_model=schemas.SubjectRecordResponse)
def get_subject_record(record_id: str, db: Session = Depends(get_db), session: SessionContext = Depends(require_staff)):
    return _owned_record(db, record_id, session)


@router.post("", response_model=schemas.SubjectRecordResponse, status_code=status.HTTP_201_CREATED)
def create_subject_record(
    record_in: schemas.SubjectRecordCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    if not session.is_admin:
        record_in.teacher_id = session.teacher_id
    try:
        record = subject_record_service.create_record(db, record_in)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.subject_record_changed("Created", record.subject_name, record.section_name, session.display_name))
    return record


@router.put("/{record_id}", response_model=schemas.SubjectRecordResponse)
def update_subject_record(
    record_id: str,
    record_update: schemas.SubjectRecordUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    _owned_record(db, record_id, session)
    if not session.is_admin:
        record_update.teacher_id = None
    try:
        record = subject_record_service.update_record(db, record_id, record_update)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.subject_record_changed("Updated", record.subject_name, record.section_name, session.display_name))
    return record


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject_record(
    record_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        record = subject_record_service.delete_record(db, record_id)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.subject_record_changed("Deleted", record.subject_name, record.section_name, session.display_name))


@router.post("/{record_id}/students", response_model=schemas.SubjectRecordResponse)
def add_students(
    record_id: str,
    roster_change: schemas.RosterChange,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    _owned_record(db, record_id, session)
    try:
        return subject_record_service.add_students(db, record_id, roster_change.student_ids)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)


@router.post("/{record_id}/students/remove", response_model=schemas.SubjectRecordResponse)
def remove_students(
    record_id: str,
    roster_change: schemas.RosterChange,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    _owned_record(db, record_id, session)
    try:
        return subject_record_service.remove_students(db, record_id, roster_change.student_ids)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)


@router.put("/{record_id}/grades", response_model=schemas.SubjectRecordResponse)
def update_grades(
    record_id: str,
    grades_update: schemas.GradesUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    """
    Save the grade sheet. Send ``expected_version`` from the last read to
    get a 409 instead of overwriting someone else's changes.
    """
    _owned_record(db, record_id, session)
    try:
        record, entries = subject_record_service.update_grades(db, record_id, grades_update, session.display_name)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    for entry in entries:
        background_tasks.add_task(record_log, entry)
    return record
