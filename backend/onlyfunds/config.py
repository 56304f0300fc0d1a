"""
Application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from typing import Optional


PLACEHOLDER_PROJECT_ID = "your_project_id_here"


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "OnlyFunds"
    log_level: str = "INFO"

    # Database (local cache)
    database_url: str = "sqlite:///./onlyfunds.sqlite"

    # Budgets
    budget_warning_threshold: int = 80  # percent used before a category is "near limit"
    progress_snapshot_periods: int = 24  # cached progress periods kept per user

    # Cloud backend (Appwrite-compatible REST API, optional)
    cloud_endpoint: Optional[str] = None  # e.g. https://cloud.appwrite.io/v1
    cloud_project_id: Optional[str] = None
    cloud_api_key: Optional[str] = None
    cloud_database_id: str = "main"
    cloud_transactions_collection_id: str = "transactions"
    cloud_budgets_collection_id: str = "budgets"
    cloud_timeout: float = 10.0

    # Server
    frontend_url: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    @property
    def cloud_configured(self) -> bool:
        return bool(
            self.cloud_endpoint
            and self.cloud_project_id
            and self.cloud_project_id != PLACEHOLDER_PROJECT_ID
        )


# Global settings instance
settings = Settings()
