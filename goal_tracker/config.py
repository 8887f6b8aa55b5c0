"""Application configuration using Pydantic Settings."""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


PLACEHOLDER_SHEET_ID = "demo-sheet-id"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Google Sheets
    google_sheet_id: Optional[str] = None
    google_service_account_email: Optional[str] = None
    google_private_key: Optional[str] = None

    goals_sheet_name: str = "Sheet1"
    users_sheet_name: str = "Users"
    weekly_sheet_name: str = "WeeklyProgress"

    # JWT
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 10080  # 7 days

    # API
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def sheets_configured(self) -> bool:
        """True when every Google value is present and the sheet id is not the placeholder."""
        return bool(
            self.google_sheet_id
            and self.google_service_account_email
            and self.google_private_key
            and self.google_sheet_id != PLACEHOLDER_SHEET_ID
        )

    @property
    def private_key(self) -> str:
        """Private key with escaped newlines expanded, as stored in .env files."""
        return (self.google_private_key or "").replace("\\n", "\n")

    @property
    def sheet_titles(self) -> dict[str, str]:
        """Worksheet title for each logical table."""
        return {
            "goals": self.goals_sheet_name,
            "users": self.users_sheet_name,
            "weekly_summaries": self.weekly_sheet_name,
        }


settings = Settings()
