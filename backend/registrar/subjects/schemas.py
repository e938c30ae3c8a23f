from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

class SubjectCreate(BaseModel):
    subject_name: str
    subject_description: str = ""
    strand_ids: List[str] = Field(..., description="Strands this subject is offered in")

class SubjectUpdate(BaseModel):
    subject_name: Optional[str] = None
    subject_description: Optional[str] = None
    strand_ids: Optional[List[str]] = None

class SubjectInDB(BaseModel):
    id: str
    subject_name: str
    subject_description: str
    strand_ids: List[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
