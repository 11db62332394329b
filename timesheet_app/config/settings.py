"""
Application Configuration Settings
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import List, Optional
import os


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Timesheet Approval System"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 4000

    # Database (the seeder refuses to run without it); MONGODB_URI is accepted as an alias
    DATABASE_URL: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("DATABASE_URL", "MONGODB_URI")
    )
    DEFAULT_DATABASE_URL: str = "sqlite:///./timesheets.db"

    @property
    def database_url(self) -> str:
        """Connection string used by the web application"""
        return self.DATABASE_URL or self.DEFAULT_DATABASE_URL

    # JWT
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480  # 8 hours

    # Registration
    MIN_PASSWORD_LENGTH: int = 6

    # Admin seeding
    SEED_ADMIN_EMAIL: str = "admin@example.com"
    SEED_ADMIN_PASSWORD: str = "Password123!"
    SEED_ADMIN_NAME: str = "Admin"

    # Timesheet rules
    MAX_HOURS_PER_DAY: float = 24.0
    STANDARD_WORKDAY_HOURS: float = 8.0

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:4000"  # Comma-separated string

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert comma-separated string to list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"
        populate_by_name = True


# Create settings instance
settings = Settings()


os.makedirs("logs", exist_ok=True)
