from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from registrar.errors import DuplicateError, NotFoundError
from registrar.models import Section
from registrar.sections.schemas import SectionCreate, SectionUpdate
from registrar.strands.crud import get_strand_or_raise

DUPLICATE_SECTION_MESSAGE = "A section with this name already exists in this strand"

def get_sections(db: Session) -> List[Section]:
    return db.query(Section).order_by(Section.section_name.asc()).all()

def get_sections_by_strand(db: Session, strand_id: str) -> List[Section]:
    return db.query(Section).filter(Section.strand_id == strand_id).order_by(Section.section_name.asc()).all()

def get_section(db: Session, section_id: str) -> Optional[Section]:
    return db.query(Section).filter(Section.id == section_id).first()

def get_section_or_raise(db: Session, section_id: str) -> Section:
    section = get_section(db, section_id)
    if not section:
        raise NotFoundError(f"Section {section_id} not found")
    return section

def section_name_exists(db: Session, strand_id: str, section_name: str, exclude_id: Optional[str] = None) -> bool:
    """
    Whether ``section_name`` is already taken within ``strand_id``.
    ``exclude_id`` skips the section being renamed.
    """
    query = db.query(Section).filter(
        Section.strand_id == strand_id,
        Section.section_name == section_name.strip(),
    )
    if exclude_id:
        query = query.filter(Section.id != exclude_id)
    return db.query(query.exists()).scalar()

def _commit_unique(db: Session) -> None:
    # The unique constraint catches the race the pre-check cannot
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(DUPLICATE_SECTION_MESSAGE)

def create_section(db: Session, section: SectionCreate) -> Section:
    name = (section.section_name or "").strip()
    if not name:
        raise ValueError("Section name is required")
    get_strand_or_raise(db, section.strand_id)
    if section_name_exists(db, section.strand_id, name):
        raise DuplicateError(DUPLICATE_SECTION_MESSAGE)

    db_section = Section(section_name=name, strand_id=section.strand_id)
    db.add(db_section)
    _commit_unique(db)
    db.refresh(db_section)
    return db_section

def update_section(db: Session, section_id: str, section_update: SectionUpdate) -> Section:
    db_section = get_section_or_raise(db, section_id)

    if section_update.section_name is not None:
        name = section_update.section_name.strip()
        if not name:
            raise ValueError("Section name is required")
        if section_name_exists(db, db_section.strand_id, name, exclude_id=section_id):
            raise DuplicateError(DUPLICATE_SECTION_MESSAGE)
        db_section.section_name = name

    for field in ("adviser_id", "adviser_name", "adviser_email"):
        value = getattr(section_update, field)
        if value is not None:
            setattr(db_section, field, value)

    _commit_unique(db)
    db.refresh(db_section)
    return db_section

def delete_section(db: Session, section_id: str) -> Section:
    db_section = get_section_or_raise(db, section_id)
    db.delete(db_section)
    db.commit()
    return db_section
