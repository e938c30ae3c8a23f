from datetime import datetime
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

EnrollmentStatusFilter = Literal["all", "pending", "approved", "rejected"]


class EnrollmentFields(BaseModel):
    grade_level: Optional[str] = None
    clearance: Optional[str] = Field(None, description="URL returned by the document upload")
    copy_of_grades: Optional[str] = Field(None, description="URL returned by the document upload")
    is_pwd: bool = False
    returning_student: bool = False
    last_grade_level: Optional[str] = None
    last_school_attended: Optional[str] = None
    last_school_year: Optional[str] = None


class EnrollmentCreate(EnrollmentFields):
    strand_id: str
    semester: str
    school_year: str


class EnrollmentUpdate(BaseModel):
    strand_id: Optional[str] = None
    semester: Optional[str] = None
    school_year: Optional[str] = None
    grade_level: Optional[str] = None
    clearance: Optional[str] = None
    copy_of_grades: Optional[str] = None
    is_pwd: Optional[bool] = None
    returning_student: Optional[bool] = None
    last_grade_level: Optional[str] = None
    last_school_attended: Optional[str] = None
    last_school_year: Optional[str] = None


class ApproveRequest(BaseModel):
    section_id: str


class RejectRequest(BaseModel):
    reason: str = Field(..., description="One of the rejection reasons, or free text")


class EnrollmentResponse(EnrollmentFields):
    id: str
    student_id: str
    student_name: str
    strand_id: str
    semester: str
    school_year: str
    status: str
    section_id: Optional[str] = None
    rejection_reason: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class EnrollmentPageResponse(BaseModel):
    items: List[EnrollmentResponse]
    page: int
    page_size: int
    total: int
    total_pages: int
    search: Optional[str] = None
    # Values present across all enrollments, for the filter dropdowns
    school_years: List[str] = []
    semesters: List[str] = []


class PendingCountResponse(BaseModel):
    pending: int


class DocumentUploadResponse(BaseModel):
    kind: str
    url: str


class EnrollmentOptionsResponse(BaseModel):
    semesters: List[Dict[str, str]]
    school_years: List[Dict[str, str]]
    default_school_year: str
    rejection_reasons: List[str]
    grade_levels: List[str]
