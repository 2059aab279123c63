from pydantic_settings import BaseSettings
from typing import List, Any
from pathlib import Path
import json


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


def parse_word_list(v: Any) -> List[str]:
    """Parse a comma-separated word list (lower-cased, blanks dropped)"""
    if isinstance(v, list):
        return [str(w).strip().lower() for w in v if str(w).strip()]
    if isinstance(v, str):
        if v.startswith('['):
            try:
                return [str(w).strip().lower() for w in json.loads(v) if str(w).strip()]
            except json.JSONDecodeError:
                pass
        return [w.strip().lower() for w in v.split(',') if w.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "UniRate"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 minutes
    DB_ECHO: bool = False

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours
    SIGNUP_TOKEN_EXPIRE_MINUTES: int = 60  # token handed out right after email verification
    RESET_TOKEN_EXPIRE_MINUTES: int = 15
    BCRYPT_ROUNDS: int = 12  # 4 for dev (fast), 12 for prod (secure)

    # Verification / reset codes
    VERIFICATION_CODE_TTL_MINUTES: int = 10
    PASSWORD_RESET_CODE_TTL_MINUTES: int = 10

    # ==========================================
    # reCAPTCHA (signup)
    # ==========================================
    RECAPTCHA_SECRET_KEY: str = ""
    RECAPTCHA_VERIFY_URL: str = "https://www.google.com/recaptcha/api/siteverify"
    SKIP_RECAPTCHA: bool = False

    # ==========================================
    # Email
    # ==========================================
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    EMAIL_FROM: str = "noreply@unirate.app"
    EMAIL_FROM_NAME: str = "UniRate"

    # ==========================================
    # Frontend
    # ==========================================
    FRONTEND_URL: str = "http://localhost:5173"

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # ==========================================
    # Request limits
    # ==========================================
    MAX_REQUEST_SIZE: int = 1048576  # 1MB, reviews are plain text

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    # ==========================================
    # Reviews & moderation
    # ==========================================
    REVIEW_DEFAULT_STATUS: str = "pending"  # pending | approved
    CONTENT_FILTER_MODE: str = "substring"  # substring | word_boundary
    CONTENT_DENYLIST_STR: str = "fuck,shit,bitch,asshole,bastard,dick,cunt,slut,whore,retard"

    @property
    def CONTENT_DENYLIST(self) -> List[str]:
        """Parse the inappropriate-terms denylist"""
        return parse_word_list(self.CONTENT_DENYLIST_STR)

    # ==========================================
    # Search
    # ==========================================
    SUGGESTIONS_MAX_DEPARTMENTS: int = 3
    SUGGESTIONS_MAX_COURSES: int = 8
    SUGGESTIONS_MAX_PROFESSORS: int = 5

    # ==========================================
    # Seed admin (scripts/seed_catalog.py)
    # ==========================================
    SEED_ADMIN_EMAIL: str = "admin@unirate.app"
    SEED_ADMIN_USERNAME: str = "admin"
    SEED_ADMIN_PASSWORD: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._base_dir = Path(__file__).resolve().parent.parent.parent
        if self.LOG_FILE:
            Path(self.LOG_FILE).parent.mkdir(exist_ok=True, parents=True)

    @property
    def BASE_DIR(self) -> Path:
        return self._base_dir

    def is_dev_mode(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT == "development" or self.DEBUG

    def is_email_configured(self) -> bool:
        return bool(self.SMTP_USER and self.SMTP_PASSWORD)

    def recaptcha_enabled(self) -> bool:
        """reCAPTCHA is enforced only when a secret is set and not skipped"""
        if not self.RECAPTCHA_SECRET_KEY:
            return False
        return not (self.is_dev_mode() and self.SKIP_RECAPTCHA)


# Create settings instance
settings = Settings()
