import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load the appropriate environment file
env_file = '.env.local' # if local or prod or staging
load_dotenv(env_file)

class Settings(BaseSettings):
    """Application settings."""
    # App settings
    APP_ENV: str = os.getenv('APP_ENV', 'production')
    PORT: int = int(os.getenv('PORT', 5000))
    FRONTEND_URL: str = os.getenv('FRONTEND_URL', '')
    ALLOW_ALL_ORIGINS: bool = os.getenv('ALLOW_ALL_ORIGINS', 'false').lower() == 'true'

    # Database settings
    # DATABASE_URL wins when set (e.g. sqlite:// for tests)
    DATABASE_URL: str = os.getenv('DATABASE_URL', '')
    DB_HOST: str = os.getenv('DB_HOST', 'localhost')
    DB_PORT: str = os.getenv('DB_PORT', '5432')
    DB_NAME: str = os.getenv('DB_NAME', 'school_registrar')
    DB_USER: str = os.getenv('DB_USER', 'postgres')
    DB_PASSWORD: str = os.getenv('DB_PASSWORD', 'postgres')

    # AWS settings
    AWS_ACCESS_KEY_ID: str = os.getenv('AWS_ACCESS_KEY_ID', '')
    AWS_SECRET_ACCESS_KEY: str = os.getenv('AWS_SECRET_ACCESS_KEY', '')
    AWS_REGION: str = os.getenv('AWS_REGION', 'ap-southeast-1')
    DOCUMENTS_BUCKET: str = os.getenv('DOCUMENTS_BUCKET', '')
    MAX_UPLOAD_BYTES: int = int(os.getenv('MAX_UPLOAD_BYTES', 10 * 1024 * 1024))  # 10MB

    # API settings
    API_TITLE: str = "School Registrar API"
    API_DESCRIPTION: str = "Enrollment and records management API for senior high school strands, sections and subjects"
    API_VERSION: str = "1.0.0"
    API_DOCS_URL: str = "/api/docs"
    API_REDOC_URL: str = "/api/redoc"
    API_OPENAPI_URL: str = "/api/openapi.json"

    # Listing
    PAGE_SIZE: int = int(os.getenv('PAGE_SIZE', 10))
    MAX_PAGE_SIZE: int = int(os.getenv('MAX_PAGE_SIZE', 100))

    # Sessions
    SESSION_TTL_HOURS: int = int(os.getenv('SESSION_TTL_HOURS', 12))
    BOOTSTRAP_ADMIN_EMAIL: str = os.getenv('BOOTSTRAP_ADMIN_EMAIL', '')
    BOOTSTRAP_ADMIN_PASSWORD: str = os.getenv('BOOTSTRAP_ADMIN_PASSWORD', '')

    # Audit log / notification delivery
    SIDE_EFFECT_MAX_ATTEMPTS: int = int(os.getenv('SIDE_EFFECT_MAX_ATTEMPTS', 3))
    SIDE_EFFECT_RETRY_DELAY_SECONDS: float = float(os.getenv('SIDE_EFFECT_RETRY_DELAY_SECONDS', 0.5))

    class Config:
        env_file = env_file

settings = Settings()
