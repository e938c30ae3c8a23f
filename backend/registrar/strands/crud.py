from typing import List, Optional
from sqlalchemy.orm import Session
from registrar.common.validation import require_min_length
from registrar.errors import NotFoundError
from registrar.models import Strand
from registrar.strands.schemas import StrandCreate, StrandUpdate

def get_strands(db: Session) -> List[Strand]:
    """
    All strands ordered by name.
    """
    return db.query(Strand).order_by(Strand.strand_name.asc()).all()

def get_strand(db: Session, strand_id: str) -> Optional[Strand]:
    return db.query(Strand).filter(Strand.id == strand_id).first()

def get_strand_or_raise(db: Session, strand_id: str) -> Strand:
    strand = get_strand(db, strand_id)
    if not strand:
        raise NotFoundError(f"Strand {strand_id} not found")
    return strand

def create_strand(db: Session, strand: StrandCreate) -> Strand:
    db_strand = Strand(
        strand_name=require_min_length(strand.strand_name, "Strand name", 2),
        strand_description=require_min_length(strand.strand_description, "Strand description", 1),
    )
    db.add(db_strand)
    db.commit()
    db.refresh(db_strand)
    return db_strand

def update_strand(db: Session, strand_id: str, strand_update: StrandUpdate) -> Strand:
    db_strand = get_strand_or_raise(db, strand_id)
    if strand_update.strand_name is not None:
        db_strand.strand_name = require_min_length(strand_update.strand_name, "Strand name", 2)
    if strand_update.strand_description is not None:
        db_strand.strand_description = require_min_length(strand_update.strand_description, "Strand description", 1)
    db.commit()
    db.refresh(db_strand)
    return db_strand

def delete_strand(db: Session, strand_id: str) -> Strand:
    """
    Delete a strand. Sections and subjects that point at it keep the now
    dangling ``strand_id``.
    """
    db_strand = get_strand_or_raise(db, strand_id)
    db.delete(db_strand)
    db.commit()
    return db_strand
