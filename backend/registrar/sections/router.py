from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from registrar.audit_logs.service import log_service, record_log
from registrar.auth.dependencies import SessionContext, get_current_session, require_admin
from registrar.database import get_db
from registrar.errors import to_http_exception, NotFoundError
from registrar.sections import crud
from registrar.sections.schemas import SectionCreate, SectionUpdate, SectionInDB

router = APIRouter(
    prefix="/api/sections",
    tags=["sections"],
    responses={404: {"description": "Not found"}},
)

@router.get("", response_model=List[SectionInDB])
def list_sections(
    strand_id: Optional[str] = Query(None, description="Only sections of this strand"),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session),
):
    if strand_id:
        return crud.get_sections_by_strand(db, strand_id)
    return crud.get_sections(db)

@router.get("/{section_id}", response_model=SectionInDB)
def get_section(section_id: str, db: Session = Depends(get_db), session: SessionContext = Depends(get_current_session)):
    try:
        return crud.get_section_or_raise(db, section_id)
    except NotFoundError as e:
        raise to_http_exception(e)

@router.post("", response_model=SectionInDB, status_code=status.HTTP_201_CREATED)
def create_section(
    section: SectionCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_section = crud.create_section(db, section)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.section_created(db_section.section_name, session.display_name))
    return db_section

@router.put("/{section_id}", response_model=SectionInDB)
def update_section(
    section_id: str,
    section_update: SectionUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_section = crud.update_section(db, section_id, section_update)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.section_updated(db_section.section_name, session.display_name))
    return db_section

@router.delete("/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_section(
    section_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_section = crud.delete_section(db, section_id)
    except NotFoundError as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.section_deleted(db_section.section_name, session.display_name))
