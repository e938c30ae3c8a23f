from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from registrar.auth.dependencies import SessionContext, require_admin
from registrar.config.school import default_school_year
from registrar.dashboard import schemas, service
from registrar.database import get_db

router = APIRouter(
    prefix="/api/dashboard",
    tags=["dashboard"],
)


@router.get("/summary", response_model=schemas.DashboardSummary)
def dashboard_summary(db: Session = Depends(get_db), session: SessionContext = Depends(require_admin)):
    return service.get_summary(db)


@router.get("/enrollment-report", response_model=schemas.EnrollmentReport)
def enrollment_report(
    school_year: Optional[str] = Query(None, description="Defaults to the current school year"),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    return service.get_enrollment_report(db, school_year or default_school_year())
