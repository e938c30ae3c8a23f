from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class StrandBase(BaseModel):
    strand_name: str = Field(..., description="Program/track label, e.g. 'STEM'")
    strand_description: str = Field(..., description="What the strand covers")

class StrandCreate(StrandBase):
    pass

class StrandUpdate(BaseModel):
    strand_name: Optional[str] = None
    strand_description: Optional[str] = None

class StrandInDB(StrandBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
