from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class SectionCreate(BaseModel):
    section_name: str = Field(..., description="Unique within its strand")
    strand_id: str

class SectionUpdate(BaseModel):
    section_name: Optional[str] = None
    adviser_id: Optional[str] = None
    adviser_name: Optional[str] = None
    adviser_email: Optional[str] = None

class SectionInDB(BaseModel):
    id: str
    section_name: str
    strand_id: str
    adviser_id: Optional[str] = None
    adviser_name: Optional[str] = None
    adviser_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
