import logging
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session

from registrar.auth.schemas import (
    LoginRequest, LoginResponse, AccountCreate, AccountResponse, SessionResponse,
    SignupRequest, ChangePasswordRequest,
)
from registrar.auth.service import auth_service
from registrar.auth.dependencies import SessionContext, get_current_account, get_current_session, require_admin
from registrar.database import get_db
from registrar.enrollments.service import enrollment_service
from registrar.errors import to_http_exception, NotFoundError
from registrar.models import Account

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["authentication"]
)

@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate with email and password and start a new session.
    Any session previously issued to the same account stops working.
    """
    try:
        account, token = auth_service.login(db=db, email=request.email, password=request.password)
    except ValueError as e:
        raise HTTPException(status_code=401, detail=str(e))

    logger.info(f"{account.role} {account.email} logged in")
    return {
        'success': True,
        'message': 'Login successful',
        'access_token': token,
        'account': account,
    }

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(account: Account = Depends(get_current_account), db: Session = Depends(get_db)):
    auth_service.logout(db, account)

@router.get("/me", response_model=SessionResponse)
def read_session(session: SessionContext = Depends(get_current_session), db: Session = Depends(get_db)):
    """
    The current session, plus the pending-enrollment badge count for admins.
    """
    return SessionResponse(
        account_id=session.account_id,
        email=session.email,
        role=session.role,
        display_name=session.display_name,
        student_id=session.student_id,
        teacher_id=session.teacher_id,
        pending_enrollments=enrollment_service.pending_count(db) if session.is_admin else None,
    )

@router.post("/accounts", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    account_in: AccountCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        return auth_service.create_account(db, account_in)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)

@router.post("/signup", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def signup(signup_in: SignupRequest, db: Session = Depends(get_db)):
    """
    Students and teachers register their own login against the ID the
    registrar already has on file. Sign in afterwards with ``/login``.
    """
    try:
        account = auth_service.signup(db, signup_in)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    logger.info(f"{account.role} {account.email} signed up")
    return account

@router.post("/change-password", response_model=LoginResponse)
def change_password(
    request: ChangePasswordRequest,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    try:
        token = auth_service.change_password(db, account, request)
    except ValueError as e:
        raise to_http_exception(e)
    return {
        'success': True,
        'message': 'Password changed successfully',
        'access_token': token,
        'account': account,
    }
