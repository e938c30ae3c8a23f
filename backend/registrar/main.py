from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from registrar.audit_logs import router as logs_router
from registrar.auth import router as auth_router
from registrar.auth.service import auth_service
from registrar.dashboard import router as dashboard_router
from registrar.enrollments import router as enrollments_router
from registrar.events import router as events_router
from registrar.health import router as health_router
from registrar.notifications import router as notifications_router
from registrar.sections import router as sections_router
from registrar.strands import router as strands_router
from registrar.students import router as students_router
from registrar.subject_records import router as subject_records_router
from registrar.subjects import router as subjects_router
from registrar.teachers import router as teachers_router
from registrar.config.settings import settings
from registrar.database import SessionLocal, init_db
from mangum import Mangum

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)

logging.getLogger().setLevel(logging.INFO)

# Prevent duplicate logs from uvicorn when running locally
if settings.APP_ENV != 'development':
    logging.getLogger("uvicorn.access").propagate = False
    logging.getLogger("uvicorn.error").propagate = False

logger = logging.getLogger(__name__)

def create_app() -> FastAPI:
    """Create and configure a FastAPI application."""
    logger.info(f"Creating FastAPI app - Environment: {settings.APP_ENV}")

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        docs_url=settings.API_DOCS_URL,
        redoc_url=settings.API_REDOC_URL,
        openapi_url=settings.API_OPENAPI_URL
    )

    @app.on_event("startup")
    async def startup_event():
        """Create tables and the bootstrap admin account"""
        logger.info("FastAPI application starting up...")
        try:
            init_db()
            db = SessionLocal()
            try:
                auth_service.ensure_bootstrap_admin(db)
            finally:
                db.close()
            logger.info("Application startup completed successfully")
        except Exception as e:
            logger.error(f"Error during startup: {str(e)}")
            raise

    allowed_origins = [
        "http://localhost:3000", # Common port for local React dev
        "http://localhost:5173", # Common port for local Vite dev
    ]

    if settings.FRONTEND_URL:
        allowed_origins.append(settings.FRONTEND_URL)
        if settings.FRONTEND_URL.endswith("/"):
            allowed_origins.append(settings.FRONTEND_URL.rstrip("/"))

    # For development/testing, allow all origins if specified
    if settings.ALLOW_ALL_ORIGINS:
        allowed_origins = ["*"]

    logger.info(f"CORS allowed origins: {allowed_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router)
    app.include_router(health_router.router)
    app.include_router(strands_router.router)
    app.include_router(sections_router.router)
    app.include_router(subjects_router.router)
    app.include_router(students_router.router)
    app.include_router(teachers_router.router)
    app.include_router(enrollments_router.router)
    app.include_router(subject_records_router.router)
    app.include_router(events_router.router)
    app.include_router(notifications_router.router)
    app.include_router(logs_router.router)
    app.include_router(dashboard_router.router)

    logger.info("FastAPI app created successfully")
    return app

_fastapi_app = create_app()

# Conditionally wrap with Mangum for serverless deployment
if settings.APP_ENV != 'development':
    logger.info("Wrapping FastAPI app with Mangum for Lambda")
    app = Mangum(_fastapi_app)
else:
    app = _fastapi_app

if __name__ == '__main__':
    import uvicorn

    port = settings.PORT
    print(f"Starting FastAPI server on port {port}...")
    print(f"Environment: {settings.APP_ENV}")
    print(f"API Documentation: http://localhost:{port}{settings.API_DOCS_URL}")

    uvicorn.run(app,
                host="0.0.0.0",
                port=port,
                log_level="info",
                access_log=False,
                reload=settings.APP_ENV == 'development')
