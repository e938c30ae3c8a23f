from datetime import date
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from registrar.common.validation import require_min_length
from registrar.errors import NotFoundError
from registrar.events.schemas import EventCreate, EventUpdate
from registrar.models import CalendarEvent, SubjectRecord, Teacher, EVENT_RECIPIENT_ALL, EVENT_RECIPIENT_STUDENTS

UPCOMING_LIMIT = 5

def _check_dates(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise ValueError("End date cannot be before the start date")

def _check_subject_records(db: Session, record_ids: List[str]) -> List[str]:
    unique_ids = list(dict.fromkeys(record_ids))
    if not unique_ids:
        return []
    found = {r.id for r in db.query(SubjectRecord.id).filter(SubjectRecord.id.in_(unique_ids)).all()}
    missing = [record_id for record_id in unique_ids if record_id not in found]
    if missing:
        raise NotFoundError(f"Subject record {missing[0]} not found")
    return unique_ids

def _visible_to(query, teacher_id: Optional[str]):
    # Teachers see the school-wide calendar plus the events they posted
    if teacher_id:
        return query.filter(or_(CalendarEvent.recipient == EVENT_RECIPIENT_ALL, CalendarEvent.teacher_id == teacher_id))
    return query

def get_events(
    db: Session,
    teacher_id: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> List[CalendarEvent]:
    """
    Events ordered by start date.

    ``from_date``/``to_date`` keep events that overlap the window, so a
    multi-day event that began last month still shows on this month's view.
    """
    query = _visible_to(db.query(CalendarEvent), teacher_id)
    if from_date:
        query = query.filter(CalendarEvent.end_date >= from_date)
    if to_date:
        query = query.filter(CalendarEvent.start_date <= to_date)
    return query.order_by(CalendarEvent.start_date.asc(), CalendarEvent.created_at.asc()).all()

def get_upcoming_events(db: Session, today: Optional[date] = None, teacher_id: Optional[str] = None) -> List[CalendarEvent]:
    today = today or date.today()
    query = _visible_to(db.query(CalendarEvent), teacher_id).filter(CalendarEvent.start_date >= today)
    return query.order_by(CalendarEvent.start_date.asc()).limit(UPCOMING_LIMIT).all()

def get_event(db: Session, event_id: str) -> Optional[CalendarEvent]:
    return db.query(CalendarEvent).filter(CalendarEvent.id == event_id).first()

def get_event_or_raise(db: Session, event_id: str) -> CalendarEvent:
    event = get_event(db, event_id)
    if not event:
        raise NotFoundError(f"Event {event_id} not found")
    return event

def create_event(db: Session, event: EventCreate, teacher_id: Optional[str] = None) -> CalendarEvent:
    """
    Admin events go to everyone; a teacher's event is addressed to students
    and carries the teacher's name.
    """
    _check_dates(event.start_date, event.end_date)
    db_event = CalendarEvent(
        title=require_min_length(event.title, "Title", 1),
        description=event.description,
        start_date=event.start_date,
        end_date=event.end_date,
        subject_record_ids=_check_subject_records(db, event.subject_record_ids),
    )
    if teacher_id:
        teacher = db.query(Teacher).filter(Teacher.employee_id == teacher_id).first()
        if not teacher:
            raise NotFoundError(f"Teacher {teacher_id} not found")
        db_event.recipient = EVENT_RECIPIENT_STUDENTS
        db_event.created_by = "teacher"
        db_event.teacher_id = teacher.employee_id
        db_event.from_teacher = teacher.full_name
    else:
        db_event.recipient = EVENT_RECIPIENT_ALL
        db_event.created_by = "admin"
    db.add(db_event)
    db.commit()
    db.refresh(db_event)
    return db_event

def update_event(db: Session, event_id: str, event_update: EventUpdate) -> CalendarEvent:
    db_event = get_event_or_raise(db, event_id)
    values = event_update.model_dump(exclude_unset=True)
    start_date = values.get("start_date") or db_event.start_date
    end_date = values.get("end_date") or db_event.end_date
    _check_dates(start_date, end_date)

    if values.get("title") is not None:
        db_event.title = require_min_length(values["title"], "Title", 1)
    if "description" in values:
        db_event.description = values["description"]
    if values.get("subject_record_ids") is not None:
        db_event.subject_record_ids = _check_subject_records(db, values["subject_record_ids"])
    db_event.start_date = start_date
    db_event.end_date = end_date
    db.commit()
    db.refresh(db_event)
    return db_event

def delete_event(db: Session, event_id: str) -> CalendarEvent:
    db_event = get_event_or_raise(db, event_id)
    db.delete(db_event)
    db.commit()
    return db_event
