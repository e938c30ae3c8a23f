from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class SubjectRecordCreate(BaseModel):
    section_id: str
    subject_id: str
    semester: str
    school_year: Optional[str] = Field(None, description="Defaults to the current school year")
    grade_level: Optional[str] = None
    time_slot: Optional[str] = None
    teacher_id: Optional[str] = Field(None, description="Employee ID; teachers default to themselves")


class SubjectRecordUpdate(BaseModel):
    section_id: Optional[str] = None
    subject_id: Optional[str] = None
    semester: Optional[str] = None
    school_year: Optional[str] = None
    grade_level: Optional[str] = None
    time_slot: Optional[str] = None
    teacher_id: Optional[str] = None


class RosterChange(BaseModel):
    student_ids: List[str] = Field(..., min_length=1)


class GradeInput(BaseModel):
    student_id: str
    first_quarter_grade: Optional[int] = None
    second_quarter_grade: Optional[int] = None
    remarks: Optional[str] = None


class GradesUpdate(BaseModel):
    grades: List[GradeInput]
    expected_version: Optional[int] = Field(None, description="Version last read; a mismatch is rejected")


class StudentGrade(BaseModel):
    student_id: str
    student_name: str = ""
    first_quarter_grade: int = 0
    second_quarter_grade: int = 0
    final_grade: int = 0
    rating: str = ""
    remarks: str = ""


class SubjectRecordResponse(BaseModel):
    id: str
    section_id: str
    section_name: str
    subject_id: str
    subject_name: str
    grade_level: Optional[str] = None
    semester: str
    time_slot: Optional[str] = None
    school_year: str
    teacher_id: Optional[str] = None
    teacher_name: Optional[str] = None
    student_list: List[str] = []
    student_grades: List[StudentGrade] = []
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StudentGradeView(StudentGrade):
    """One grade row as the student sees it, with the record it came from."""
    subject_record_id: str
    subject_name: str
    section_name: str
    semester: str
    school_year: str
    teacher_name: Optional[str] = None


class HonorRollEntry(BaseModel):
    student_id: str
    student_name: str
    average_grade: float
    total_subjects: int
    honor_distinction: str
