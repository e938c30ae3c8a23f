from datetime import datetime
from pydantic import BaseModel, ConfigDict


class AuditLogResponse(BaseModel):
    id: str
    student_id: str
    name: str
    description: str
    logs_by: str
    date: datetime

    model_config = ConfigDict(from_attributes=True)
