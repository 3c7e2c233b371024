"""Configuration management using pydantic-settings"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Demo limits
    demo_session_hours: int = Field(default=24, gt=0, description="Length of a usage window in hours")
    demo_session_price_limit: float = Field(default=5.0, ge=0, description="Spend ceiling (USD) per usage window")
    demo_max_documents_per_session: int = Field(default=20, gt=0, description="Documents allowed per usage window")
    demo_max_file_size: int = Field(default=10 * 1024 * 1024, gt=0, description="Max upload size in bytes")
    # $0.0005 per 1000 characters (~$0.50 per million chars)
    demo_price_per_thousand_chars: float = Field(default=0.0005, ge=0, description="USD per 1000 characters processed")

    # Completion endpoint
    case_api_key: Optional[str] = Field(default=None, description="API key for the completion endpoint")
    case_api_base: str = Field(default="https://api.case.dev", description="Completion endpoint base URL")
    llm_model: str = Field(default="casemark/casemark-core-1", description="LLM model to use")
    llm_temperature: float = Field(default=0.7, description="LLM temperature")
    llm_max_tokens: int = Field(default=8000, description="Max tokens in response")

    storage_path: str = Field(default="./data/prep.db", description="Path to the SQLite key-value store")
    log_level: str = Field(default="INFO", description="Logging level")
    error_banner_seconds: int = Field(default=10, description="Seconds before an error notice is dismissed")

    # Demo surface
    demo_mode: bool = Field(default=True, description="Run with demo limits and banner")
    demo_app_name: str = Field(default="Deposition Prep Tools", description="Display name")
    demo_upgrade_url: str = Field(default="https://case.dev", description="Upgrade link")
    demo_contact_email: str = Field(default="sales@case.dev", description="Sales contact")
    demo_expiry_days: int = Field(default=0, description="Days until the demo expires (0 = never)")

    # Feature flags
    demo_feature_export: bool = False
    demo_feature_bulk_upload: bool = False
    demo_feature_advanced_search: bool = False
    demo_feature_customization: bool = False
    demo_feature_api_access: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    """Get application settings"""
    return Settings()


def _megabytes(size: int) -> str:
    return f"{size / (1024 * 1024):.0f}MB"


def limit_descriptions(settings: Settings) -> dict:
    """Human-readable limit descriptions for display"""
    return {
        "pricing": {
            "session_limit": (
                f"${settings.demo_session_price_limit:.2f} per "
                f"{settings.demo_session_hours}hr session"
            ),
        },
        "documents": {
            "max_documents_per_session": f"{settings.demo_max_documents_per_session} documents per session",
            "max_file_size": f"{_megabytes(settings.demo_max_file_size)} max file size",
        },
    }


def upgrade_messages(settings: Settings) -> dict:
    """Upgrade prompts shown when a limit is hit"""
    return {
        "price_limit": {
            "title": "Session Limit Reached",
            "description": (
                f"You've reached the ${settings.demo_session_price_limit:.2f} demo session limit. "
                "Upgrade to unlock unlimited processing."
            ),
            "cta": "Upgrade to Pro",
        },
        "document_limit": {
            "title": "Document Limit Reached",
            "description": (
                "You've reached the demo document processing limit. "
                "Upgrade for unlimited document processing."
            ),
            "cta": "Upgrade to Pro",
        },
        "file_too_large": {
            "title": "File Too Large",
            "description": (
                f"Files must be under {_megabytes(settings.demo_max_file_size)}. "
                "Upgrade to process larger files."
            ),
            "cta": "Upgrade to Pro",
        },
        "feature_disabled": {
            "title": "Feature Not Available",
            "description": "This feature is not available in demo mode. Upgrade to access all features.",
            "cta": "Upgrade to Pro",
        },
    }
