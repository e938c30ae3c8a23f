import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from registrar.config.settings import settings

logger = logging.getLogger(__name__)

# Database URL
DATABASE_URL = settings.DATABASE_URL or f"postgresql://{settings.DB_USER}:{settings.DB_PASSWORD}@{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"

if DATABASE_URL.startswith("sqlite"):
    # Single shared connection so an in-memory database survives across sessions
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """FastAPI dependency to get a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    """Initialize the database using the schema defined by SQLAlchemy models."""
    try:
        # Import all models here before calling create_all
        # This ensures they are registered with Base's metadata
        from registrar import models  # noqa: F401

        logger.info("Attempting to create database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully (if they didn't exist)!")

    except Exception as e:
        logger.error(f"Database initialization error: {e}")
        logger.error("Please ensure the database server is running and accessible.")
        logger.error(f"Connection string used: postgresql://{settings.DB_USER}:<PASSWORD>@{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}")
        raise
