from pydantic_settings import BaseSettings
from typing import List
import os

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "ClinicSync"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    TESTING: bool = os.getenv("TESTING", "0").lower() in ("1", "true", "t", "yes", "y")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./clinicsync.db")
    TEST_DATABASE_URL: str = os.getenv("TEST_DATABASE_URL", "sqlite://")

    # Security
    JWT_SECRET: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Single administrator account
    ADMIN_EMAIL: str = "admin@clinicsync.com"
    ADMIN_PASSWORD: str = "change-this-admin-password"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:5174", "http://testserver"]

    # Client session layer
    BACKEND_URL: str = "http://localhost:4000"
    REQUEST_TIMEOUT_SECONDS: float = 20.0
    CREDENTIAL_STORE_PATH: str = ".clinicsync/storage.json"

    @property
    def get_database_url(self):
        """Return the appropriate database URL based on if we're testing"""
        if self.TESTING:
            return self.TEST_DATABASE_URL
        return self.DATABASE_URL

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()
