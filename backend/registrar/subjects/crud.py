from typing import List, Optional
from sqlalchemy.orm import Session
from registrar.errors import NotFoundError
from registrar.models import Subject
from registrar.strands.crud import get_strand_or_raise
from registrar.subjects.schemas import SubjectCreate, SubjectUpdate

def get_subjects(db: Session) -> List[Subject]:
    return db.query(Subject).order_by(Subject.subject_name.asc()).all()

def get_subjects_by_strand(db: Session, strand_id: str) -> List[Subject]:
    """
    Subjects whose ``strand_ids`` array contains ``strand_id``.
    Membership is checked in Python since the array is a JSON column.
    """
    return [subject for subject in get_subjects(db) if strand_id in (subject.strand_ids or [])]

def get_subject(db: Session, subject_id: str) -> Optional[Subject]:
    return db.query(Subject).filter(Subject.id == subject_id).first()

def get_subject_or_raise(db: Session, subject_id: str) -> Subject:
    subject = get_subject(db, subject_id)
    if not subject:
        raise NotFoundError(f"Subject {subject_id} not found")
    return subject

def _validated_strand_ids(db: Session, strand_ids: List[str]) -> List[str]:
    unique_ids = list(dict.fromkeys(strand_id for strand_id in strand_ids if strand_id))
    if not unique_ids:
        raise ValueError("Select at least one strand")
    for strand_id in unique_ids:
        get_strand_or_raise(db, strand_id)
    return unique_ids

def create_subject(db: Session, subject: SubjectCreate) -> Subject:
    name = (subject.subject_name or "").strip()
    if not name:
        raise ValueError("Subject name is required")
    db_subject = Subject(
        subject_name=name,
        subject_description=(subject.subject_description or "").strip(),
        strand_ids=_validated_strand_ids(db, subject.strand_ids),
    )
    db.add(db_subject)
    db.commit()
    db.refresh(db_subject)
    return db_subject

def update_subject(db: Session, subject_id: str, subject_update: SubjectUpdate) -> Subject:
    db_subject = get_subject_or_raise(db, subject_id)
    if subject_update.subject_name is not None:
        name = subject_update.subject_name.strip()
        if not name:
            raise ValueError("Subject name is required")
        db_subject.subject_name = name
    if subject_update.subject_description is not None:
        db_subject.subject_description = subject_update.subject_description.strip()
    if subject_update.strand_ids is not None:
        db_subject.strand_ids = _validated_strand_ids(db, subject_update.strand_ids)
    db.commit()
    db.refresh(db_subject)
    return db_subject

def delete_subject(db: Session, subject_id: str) -> Subject:
    db_subject = get_subject_or_raise(db, subject_id)
    db.delete(db_subject)
    db.commit()
    return db_subject
