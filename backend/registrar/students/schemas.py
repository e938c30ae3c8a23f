from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field

from registrar.models import STUDENT_STATUSES, STUDENT_STATUS_NOT_SET

StudentStatus = Literal["enrolled", "transfer-in", "transfer-out", "incomplete", "graduated"]
StudentStatusFilter = Literal["enrolled", "transfer-in", "transfer-out", "incomplete", "graduated", "not-set"]
StudentSearchField = Literal["student_id", "first_name", "last_name"]


def classify_status(status: Optional[str]) -> str:
    """Anything that is not one of the five explicit statuses reads as not-set."""
    return status if status in STUDENT_STATUSES else STUDENT_STATUS_NOT_SET


class StudentContactFields(BaseModel):
    """Fields a student may change from their own settings page."""
    email: Optional[str] = None
    contact_number: Optional[str] = None
    address: Optional[str] = None
    father_name: Optional[str] = None
    father_occupation: Optional[str] = None
    father_contact_number: Optional[str] = None
    mother_name: Optional[str] = None
    mother_occupation: Optional[str] = None
    mother_contact_number: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_occupation: Optional[str] = None
    guardian_contact_number: Optional[str] = None


class StudentProfileFields(StudentContactFields):
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    suffix: Optional[str] = None
    sex: Optional[str] = None
    birth_date: Optional[str] = None
    birth_place: Optional[str] = None
    civil_status: Optional[str] = None
    nationality: Optional[str] = None
    religion: Optional[str] = None
    mother_tongue: Optional[str] = None


class StudentCreate(StudentProfileFields):
    student_id: str = Field(..., description="Human-facing ID; no spaces, stored uppercase")


class StudentUpdate(StudentProfileFields):
    """Admin edit: everything except the human-facing ID."""
    status: Optional[StudentStatus] = None


class StudentSelfUpdate(StudentContactFields):
    pass


class StudentStatusUpdate(BaseModel):
    status: StudentStatus


class StudentResponse(StudentProfileFields):
    id: str
    student_id: str
    status: Optional[str] = None
    enrolled_for_section_id: Optional[str] = None
    enrolled_for_semester: Optional[str] = None
    enrolled_for_school_year: Optional[str] = None
    profile_complete: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def status_label(self) -> str:
        return classify_status(self.status)
