from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from registrar.audit_logs.service import log_service, record_log
from registrar.auth.dependencies import SessionContext, get_current_session, require_admin
from registrar.database import get_db
from registrar.errors import to_http_exception, NotFoundError
from registrar.subjects import crud
from registrar.subjects.schemas import SubjectCreate, SubjectUpdate, SubjectInDB

router = APIRouter(
    prefix="/api/subjects",
    tags=["subjects"],
    responses={404: {"description": "Not found"}},
)

@router.get("", response_model=List[SubjectInDB])
def list_subjects(
    strand_id: Optional[str] = Query(None, description="Only subjects offered in this strand"),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session),
):
    if strand_id:
        return crud.get_subjects_by_strand(db, strand_id)
    return crud.get_subjects(db)

@router.get("/{subject_id}", response_model=SubjectInDB)
def get_subject(subject_id: str, db: Session = Depends(get_db), session: SessionContext = Depends(get_current_session)):
    try:
        return crud.get_subject_or_raise(db, subject_id)
    except NotFoundError as e:
        raise to_http_exception(e)

@router.post("", response_model=SubjectInDB, status_code=status.HTTP_201_CREATED)
def create_subject(
    subject: SubjectCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_subject = crud.create_subject(db, subject)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.subject_changed("Created", db_subject.subject_name, session.display_name))
    return db_subject

@router.put("/{subject_id}", response_model=SubjectInDB)
def update_subject(
    subject_id: str,
    subject_update: SubjectUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_subject = crud.update_subject(db, subject_id, subject_update)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.subject_changed("Updated", db_subject.subject_name, session.display_name))
    return db_subject

@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject(
    subject_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_subject = crud.delete_subject(db, subject_id)
    except NotFoundError as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.subject_changed("Deleted", db_subject.subject_name, session.display_name))
