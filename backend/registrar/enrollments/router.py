import logging
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from registrar.audit_logs.service import log_service, record_log
from registrar.auth.dependencies import SessionContext, get_current_session, require_admin, require_student
from registrar.config.school import GRADE_LEVELS, REJECTION_REASONS, SEMESTER_OPTIONS, default_school_year, school_year_options
from registrar.config.settings import settings
from registrar.database import get_db
from registrar.enrollments import schemas
from registrar.enrollments.service import EnrollmentFilters, enrollment_service
from registrar.errors import to_http_exception, NotFoundError
from registrar.notifications.service import send_notification
from registrar.storage.service import StorageError, StorageService, get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/enrollments",
    tags=["enrollments"],
)


def _own_student_id(session: SessionContext) -> str:
    if not session.student_id:
        raise HTTPException(status_code=403, detail="This account is not linked to a student record")
    return session.student_id


@router.get("", response_model=schemas.EnrollmentPageResponse)
def list_enrollments(
    status_filter: schemas.EnrollmentStatusFilter = Query("all", alias="status"),
    school_year: Optional[str] = Query(None),
    semester: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Substring of the student name"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    filters = EnrollmentFilters(status=status_filter, school_year=school_year, semester=semester, search=search or "")
    listing = enrollment_service.list_enrollments(db, filters, page=page, page_size=page_size)
    return schemas.EnrollmentPageResponse(
        items=[schemas.EnrollmentResponse.model_validate(e) for e in listing.page.items],
        page=listing.page.page,
        page_size=listing.page.page_size,
        total=listing.page.total,
        total_pages=listing.page.total_pages,
        search=search,
        school_years=listing.school_years,
        semesters=listing.semesters,
    )


@router.get("/pending-count", response_model=schemas.PendingCountResponse)
def pending_count(db: Session = Depends(get_db), session: SessionContext = Depends(require_admin)):
    return {"pending": enrollment_service.pending_count(db)}


@router.get("/options", response_model=schemas.EnrollmentOptionsResponse)
def enrollment_options(session: SessionContext = Depends(get_current_session)):
    return {
        "semesters": SEMESTER_OPTIONS,
        "school_years": school_year_options(),
        "default_school_year": default_school_year(),
        "rejection_reasons": REJECTION_REASONS,
        "grade_levels": GRADE_LEVELS,
    }


@router.get("/me", response_model=List[schemas.EnrollmentResponse])
def list_own_enrollments(db: Session = Depends(get_db), session: SessionContext = Depends(require_student)):
    return enrollment_service.list_for_student(db, _own_student_id(session))


@router.post("", response_model=schemas.EnrollmentResponse, status_code=status.HTTP_201_CREATED)
def submit_enrollment(
    enrollment_in: schemas.EnrollmentCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_student),
):
    try:
        return enrollment_service.submit(db, _own_student_id(session), enrollment_in)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)


@router.post("/documents", response_model=schemas.DocumentUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    kind: str = Form(..., description="clearance or copy_of_grades"),
    file: UploadFile = File(...),
    session: SessionContext = Depends(require_student),
    storage: StorageService = Depends(get_storage_service),
):
    """Upload a supporting document; the returned URL goes on the enrollment."""
    content = await file.read()
    try:
        url = storage.upload_document(kind, _own_student_id(session), content, file.content_type)
    except ValueError as e:
        raise to_http_exception(e)
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return {"kind": kind, "url": url}


@router.get("/{enrollment_id}", response_model=schemas.EnrollmentResponse)
def get_enrollment(enrollment_id: str, db: Session = Depends(get_db), session: SessionContext = Depends(get_current_session)):
    try:
        enrollment = enrollment_service.get_or_raise(db, enrollment_id)
    except NotFoundError as e:
        raise to_http_exception(e)
    if not session.is_admin and enrollment.student_id != session.student_id:
        raise HTTPException(status_code=404, detail=f"Enrollment {enrollment_id} not found")
    return enrollment


@router.put("/{enrollment_id}", response_model=schemas.EnrollmentResponse)
def update_own_enrollment(
    enrollment_id: str,
    enrollment_update: schemas.EnrollmentUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_student),
):
    try:
        return enrollment_service.update_own(db, enrollment_id, _own_student_id(session), enrollment_update)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)


@router.post("/{enrollment_id}/approve", response_model=schemas.EnrollmentResponse)
def approve_enrollment(
    enrollment_id: str,
    request: schemas.ApproveRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        enrollment = enrollment_service.approve(db, enrollment_id, request.section_id, session.display_name)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    except SQLAlchemyError as e:
        raise to_http_exception(e)

    background_tasks.add_task(
        send_notification,
        enrollment.student_id,
        "Enrollment Approved",
        f"Your enrollment has been approved for {enrollment.semester} semester {enrollment.school_year}.",
    )
    background_tasks.add_task(record_log, log_service.enrollment_approved(enrollment.student_id, enrollment.student_name, session.display_name))
    return enrollment


@router.post("/{enrollment_id}/reject", response_model=schemas.EnrollmentResponse)
def reject_enrollment(
    enrollment_id: str,
    request: schemas.RejectRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    try:
        enrollment = enrollment_service.reject(db, enrollment_id, request.reason, session.display_name)
    except (ValueError, NotFoundError) as e:
        raise to_http_exception(e)
    except SQLAlchemyError as e:
        raise to_http_exception(e)

    background_tasks.add_task(send_notification, enrollment.student_id, "Enrollment Rejected", enrollment.rejection_reason)
    background_tasks.add_task(record_log, log_service.enrollment_rejected(enrollment.student_id, enrollment.student_name, session.display_name))
    return enrollment
