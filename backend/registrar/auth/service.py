import logging
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from registrar.auth import schemas
from registrar.config.settings import settings
from registrar.errors import DuplicateError, NotFoundError
from registrar.models import Account, Student, Teacher, ROLES

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8


def check_new_password(password: str, confirmation: str) -> None:
    """
    Rules for passwords users choose themselves.

    Raises:
        ValueError: too short, missing a lowercase letter, uppercase letter
            or digit, or not matching the confirmation.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not (re.search(r"[a-z]", password) and re.search(r"[A-Z]", password) and re.search(r"\d", password)):
        raise ValueError("Password must contain an uppercase letter, a lowercase letter and a number")
    if password != confirmation:
        raise ValueError("Passwords do not match")


def _as_aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AuthService:
    """Accounts and single-device login sessions."""

    def hash_password(self, password: str) -> str:
        return pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    def get_account_by_email(self, db: Session, email: str) -> Optional[Account]:
        return db.query(Account).filter(Account.email == email.strip().lower()).first()

    def create_account(self, db: Session, account_in: schemas.AccountCreate) -> Account:
        if account_in.role not in ROLES:
            raise ValueError(f"Role must be one of: {', '.join(ROLES)}")
        if self.get_account_by_email(db, account_in.email):
            raise DuplicateError("An account with this email already exists")

        display_name = account_in.display_name or ""
        student_id = None
        teacher_id = None
        if account_in.role == "student":
            if not account_in.student_id:
                raise ValueError("Student accounts must be linked to a student ID")
            student = db.query(Student).filter(Student.student_id == account_in.student_id.strip().upper()).first()
            if not student:
                raise NotFoundError(f"Student {account_in.student_id} not found")
            student_id = student.student_id
            display_name = display_name or student.full_name
        elif account_in.role == "teacher":
            if not account_in.teacher_id:
                raise ValueError("Teacher accounts must be linked to an employee ID")
            teacher = db.query(Teacher).filter(Teacher.employee_id == account_in.teacher_id.strip().upper()).first()
            if not teacher:
                raise NotFoundError(f"Teacher {account_in.teacher_id} not found")
            teacher_id = teacher.employee_id
            display_name = display_name or teacher.full_name

        account = Account(
            email=account_in.email.strip().lower(),
            password_hash=self.hash_password(account_in.password),
            role=account_in.role,
            display_name=display_name or account_in.email,
            student_id=student_id,
            teacher_id=teacher_id,
        )
        db.add(account)
        db.commit()
        db.refresh(account)
        logger.info(f"Created {account.role} account {account.email}")
        return account

    def signup(self, db: Session, signup_in: schemas.SignupRequest) -> Account:
        """
        Register a login for an existing student or teacher record.

        Each student ID or employee ID can hold one account; a second signup
        for the same person is a conflict, as is an email already in use.
        """
        email = signup_in.email.strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValueError("Please enter a valid email address")
        check_new_password(signup_in.password, signup_in.confirm_password)

        if signup_in.role == "student":
            linked_id = (signup_in.student_id or "").strip().upper()
            taken = db.query(Account).filter(Account.student_id == linked_id).first() if linked_id else None
        else:
            linked_id = (signup_in.teacher_id or "").strip().upper()
            taken = db.query(Account).filter(Account.teacher_id == linked_id).first() if linked_id else None
        if taken:
            raise DuplicateError(f"{linked_id} is already registered with a different email")

        return self.create_account(db, schemas.AccountCreate(
            email=email,
            password=signup_in.password,
            role=signup_in.role,
            student_id=signup_in.student_id,
            teacher_id=signup_in.teacher_id,
        ))

    def change_password(self, db: Session, account: Account, request: schemas.ChangePasswordRequest) -> str:
        """
        Replace the password and issue a fresh session token.

        Returns the new token; the token used for this request stops working.
        """
        if not self.verify_password(request.current_password, account.password_hash):
            raise ValueError("Current password is incorrect")
        if request.current_password == request.new_password:
            raise ValueError("New password must be different from the current password")
        check_new_password(request.new_password, request.confirm_password)

        account.password_hash = self.hash_password(request.new_password)
        account.session_token = secrets.token_hex(32)
        account.session_expires_at = datetime.now(timezone.utc) + timedelta(hours=settings.SESSION_TTL_HOURS)
        db.commit()
        db.refresh(account)
        logger.info(f"Password changed for {account.email}")
        return account.session_token

    def login(self, db: Session, email: str, password: str) -> Tuple[Account, str]:
        """
        Verify credentials and issue a new session token.

        Issuing a token replaces the one stored on the account, so signing in
        on a second device ends the session on the first.
        """
        account = self.get_account_by_email(db, email)
        if not account or not self.verify_password(password, account.password_hash):
            raise ValueError("Invalid email or password")

        now = datetime.now(timezone.utc)
        account.session_token = secrets.token_hex(32)
        account.session_expires_at = now + timedelta(hours=settings.SESSION_TTL_HOURS)
        account.last_login_at = now
        db.commit()
        db.refresh(account)
        return account, account.session_token

    def logout(self, db: Session, account: Account) -> None:
        account.session_token = None
        account.session_expires_at = None
        db.commit()

    def get_account_by_token(self, db: Session, token: str) -> Optional[Account]:
        account = db.query(Account).filter(Account.session_token == token).first()
        if not account:
            return None
        expires_at = _as_aware(account.session_expires_at)
        if expires_at is not None and expires_at < datetime.now(timezone.utc):
            return None
        return account

    def ensure_bootstrap_admin(self, db: Session) -> Optional[Account]:
        if not settings.BOOTSTRAP_ADMIN_EMAIL or not settings.BOOTSTRAP_ADMIN_PASSWORD:
            return None
        existing = self.get_account_by_email(db, settings.BOOTSTRAP_ADMIN_EMAIL)
        if existing:
            return existing
        logger.info(f"Creating bootstrap admin account {settings.BOOTSTRAP_ADMIN_EMAIL}")
        return self.create_account(db, schemas.AccountCreate(
            email=settings.BOOTSTRAP_ADMIN_EMAIL,
            password=settings.BOOTSTRAP_ADMIN_PASSWORD,
            role="admin",
            display_name="Admin",
        ))

auth_service = AuthService()
