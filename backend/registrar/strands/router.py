from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from registrar.audit_logs.service import log_service, record_log
from registrar.auth.dependencies import SessionContext, get_current_session, require_admin
from registrar.database import get_db
from registrar.errors import to_http_exception, NotFoundError
from registrar.strands import crud
from registrar.strands.schemas import StrandCreate, StrandUpdate, StrandInDB

router = APIRouter(
    prefix="/api/strands",
    tags=["strands"],
    responses={404: {"description": "Not found"}},
)

@router.get("", response_model=List[StrandInDB])
def list_strands(db: Session = Depends(get_db), session: SessionContext = Depends(get_current_session)):
    return crud.get_strands(db)

@router.get("/{strand_id}", response_model=StrandInDB)
def get_strand(strand_id: str, db: Session = Depends(get_db), session: SessionContext = Depends(get_current_session)):
    try:
        return crud.get_strand_or_raise(db, strand_id)
    except NotFoundError as e:
        raise to_http_exception(e)

@router.post("", response_model=StrandInDB, status_code=status.HTTP_201_CREATED)
def create_strand(
    strand: StrandCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_strand = crud.create_strand(db, strand)
    except ValueError as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.strand_created(db_strand.strand_name, session.display_name))
    return db_strand

@router.put("/{strand_id}", response_model=StrandInDB)
def update_strand(
    strand_id: str,
    strand_update: StrandUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_strand = crud.update_strand(db, strand_id, strand_update)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.strand_updated(db_strand.strand_name, session.display_name))
    return db_strand

@router.delete("/{strand_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_strand(
    strand_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        db_strand = crud.delete_strand(db, strand_id)
    except NotFoundError as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.strand_deleted(db_strand.strand_name, session.display_name))
