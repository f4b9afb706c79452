"""
Configuration settings for Workforce Docs.
Uses Pydantic for type-safe configuration management.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Workforce Docs"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "postgresql+asyncpg://workforce_user:workforce_pass@db:5432/workforce_db"

    # Security
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours
    superadmin_email: str = "admin@mpdee.co.uk"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # API
    api_v1_prefix: str = "/api/v1"

    # Email (Resend)
    resend_api_key: Optional[str] = None
    resend_from_email: str = "MPDEE DigiDocs <no-reply@mpdee.co.uk>"
    resend_api_url: str = "https://api.resend.com/emails"
    demo_email_domain: str = "digidocsdemo.com"

    # File storage
    storage_dir: str = "./storage"

    # Printed form header
    company_name: str = "MPDEE DIGIDOCS"
    company_address: str = (
        "REGISTERED OFFICE: VIVIENNE HOUSE, RACECOURSE ROAD, CREW LANE INDUSTRIAL ESTATE, "
        "SOUTHWELL, NOTTS. NG25 0TX"
    )
    company_phone: str = "Telephone: SOUTHWELL (01636) 812227"
    company_registration: str = "Registered in England No. 1000918"

    # Reports
    max_inspections_per_pdf: int = 80

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
