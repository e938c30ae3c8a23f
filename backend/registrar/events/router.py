from datetime import date
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from registrar.audit_logs.service import log_service, record_log
from registrar.auth.dependencies import SessionContext, get_current_session, require_staff
from registrar.database import get_db
from registrar.errors import to_http_exception, NotFoundError
from registrar.events import crud
from registrar.events.schemas import EventCreate, EventUpdate, EventInDB
from registrar.models import CalendarEvent

router = APIRouter(
    prefix="/api/events",
    tags=["calendar"],
    responses={404: {"description": "Not found"}},
)

def _visible_teacher_id(session: SessionContext) -> Optional[str]:
    return session.teacher_id if session.role == "teacher" else None

def _editable_event(db: Session, event_id: str, session: SessionContext) -> CalendarEvent:
    """Admins edit any event; teachers only the ones they posted."""
    try:
        event = crud.get_event_or_raise(db, event_id)
    except NotFoundError as e:
        raise to_http_exception(e)
    if not session.is_admin and event.teacher_id != session.teacher_id:
        raise HTTPException(status_code=403, detail="You can only change events you created")
    return event

@router.get("", response_model=List[EventInDB])
def list_events(
    from_date: Optional[date] = Query(None, alias="from", description="Only events ending on or after this day"),
    to_date: Optional[date] = Query(None, alias="to", description="Only events starting on or before this day"),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session),
):
    return crud.get_events(db, teacher_id=_visible_teacher_id(session), from_date=from_date, to_date=to_date)

@router.get("/upcoming", response_model=List[EventInDB])
def upcoming_events(db: Session = Depends(get_db), session: SessionContext = Depends(get_current_session)):
    """The next few events starting today or later, soonest first."""
    return crud.get_upcoming_events(db, teacher_id=_visible_teacher_id(session))

@router.get("/{event_id}", response_model=EventInDB)
def get_event(event_id: str, db: Session = Depends(get_db), session: SessionContext = Depends(get_current_session)):
    try:
        return crud.get_event_or_raise(db, event_id)
    except NotFoundError as e:
        raise to_http_exception(e)

@router.post("", response_model=EventInDB, status_code=status.HTTP_201_CREATED)
def create_event(
    event: EventCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    try:
        db_event = crud.create_event(db, event, teacher_id=None if session.is_admin else session.teacher_id)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.event_changed("Created", db_event.title, session.display_name))
    return db_event

@router.put("/{event_id}", response_model=EventInDB)
def update_event(
    event_id: str,
    event_update: EventUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    _editable_event(db, event_id, session)
    try:
        db_event = crud.update_event(db, event_id, event_update)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    background_tasks.add_task(record_log, log_service.event_changed("Updated", db_event.title, session.display_name))
    return db_event

@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_staff),
):
    _editable_event(db, event_id, session)
    db_event = crud.delete_event(db, event_id)
    background_tasks.add_task(record_log, log_service.event_changed("Deleted", db_event.title, session.display_name))
