from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException, Depends
from sqlalchemy.orm import Session

from registrar.database import get_db
from registrar.auth.service import auth_service
from registrar.models import Account


@dataclass(frozen=True)
class SessionContext:
    """
    Who is making the request.

    Built once per request from the bearer token and handed to the routes
    that need it.
    """
    account_id: str
    email: str
    role: str
    display_name: str
    student_id: Optional[str] = None
    teacher_id: Optional[str] = None

    @classmethod
    def from_account(cls, account: Account) -> "SessionContext":
        return cls(
            account_id=account.id,
            email=account.email,
            role=account.role,
            display_name=account.display_name,
            student_id=account.student_id,
            teacher_id=account.teacher_id,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith('Bearer '):
        raise HTTPException(status_code=401, detail="Unauthorized: Missing or invalid Bearer token format")

    parts = authorization.split(' ')
    if len(parts) != 2 or parts[0] != 'Bearer' or not parts[1]:
        raise HTTPException(status_code=401, detail="Unauthorized: Invalid token content")
    return parts[1]


async def get_current_account(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db)
) -> Account:
    """
    Validates the session token and retrieves the account it belongs to.
    """
    token = _bearer_token(authorization)
    account = auth_service.get_account_by_token(db, token)

    if account is None:
        # Expired, logged out, or replaced by a login on another device
        raise HTTPException(status_code=401, detail="Unauthorized: Session is no longer valid")

    return account


async def get_current_session(account: Account = Depends(get_current_account)) -> SessionContext:
    return SessionContext.from_account(account)


def require_role(*roles: str):
    """Dependency factory that admits only sessions whose role is in ``roles``."""
    async def _check(session: SessionContext = Depends(get_current_session)) -> SessionContext:
        if session.role not in roles:
            raise HTTPException(status_code=403, detail="Forbidden: insufficient role")
        return session
    return _check


require_admin = require_role("admin")
require_staff = require_role("admin", "teacher")
require_student = require_role("student")
