from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class AccountCreate(BaseModel):
    email: str = Field(..., min_length=3, description="Login email, stored lowercase")
    password: str = Field(..., min_length=6)
    role: Literal["admin", "teacher", "student"]
    display_name: Optional[str] = None
    student_id: Optional[str] = Field(None, description="Required for student accounts")
    teacher_id: Optional[str] = Field(None, description="Employee ID, required for teacher accounts")


class AccountResponse(BaseModel):
    id: str
    email: str
    role: str
    display_name: str
    student_id: Optional[str] = None
    teacher_id: Optional[str] = None
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    success: bool
    message: str
    access_token: str
    token_type: str = "bearer"
    account: AccountResponse


class SessionResponse(BaseModel):
    account_id: str
    email: str
    role: str
    display_name: str
    student_id: Optional[str] = None
    teacher_id: Optional[str] = None
    pending_enrollments: Optional[int] = None


class SignupRequest(BaseModel):
    """Self-service registration for a student or teacher the registrar already has on file."""
    email: str = Field(..., min_length=3)
    password: str
    confirm_password: str
    role: Literal["teacher", "student"]
    student_id: Optional[str] = None
    teacher_id: Optional[str] = Field(None, description="Employee ID")


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str
