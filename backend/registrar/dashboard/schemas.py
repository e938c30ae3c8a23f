from typing import Dict, List
from pydantic import BaseModel


class DashboardSummary(BaseModel):
    students: int
    teachers: int
    strands: int
    sections: int
    pending_enrollments: int
    students_without_status: int


class StrandCount(BaseModel):
    strand_id: str
    strand_name: str
    approved: int


class EnrollmentReport(BaseModel):
    school_year: str
    enrolled_students: int
    approved_enrollments: int
    by_strand: List[StrandCount]
    by_semester: Dict[str, int]
