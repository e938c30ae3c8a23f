from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

TeacherSearchField = Literal["employee_id", "first_name", "last_name"]


class TeacherSettingsFields(BaseModel):
    """What a teacher may change from their own settings page."""
    contact_number: Optional[str] = None
    address: Optional[str] = None


class TeacherProfileFields(TeacherSettingsFields):
    email: Optional[str] = None
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    designated_section_id: Optional[str] = None


class TeacherCreate(TeacherProfileFields):
    employee_id: str = Field(..., description="Human-facing ID; no spaces, stored uppercase")
    active_status: Optional[bool] = True


class TeacherUpdate(TeacherProfileFields):
    active_status: Optional[bool] = None


class TeacherSelfUpdate(TeacherSettingsFields):
    pass


class TeacherResponse(TeacherProfileFields):
    id: str
    employee_id: str
    active_status: Optional[bool] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
