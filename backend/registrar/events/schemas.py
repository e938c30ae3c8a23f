from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

class EventBase(BaseModel):
    title: str = Field(..., description="Shown on the calendar cell")
    description: Optional[str] = None
    start_date: date
    end_date: date
    subject_record_ids: List[str] = Field(default_factory=list, description="Classes the event is about, if any")

class EventCreate(EventBase):
    pass

class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    subject_record_ids: Optional[List[str]] = None

class EventInDB(EventBase):
    id: str
    recipient: str
    created_by: str
    teacher_id: Optional[str] = None
    from_teacher: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
