"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    supabase_service_key: str
    registrations_table: str = "inscricoes"
    admins_table: str = "admins"
    group_invite_url: str = "https://chat.whatsapp.com/CpQZUkK7X7e9NM40s9952i"
    session_duration_seconds: int = 3600
    expiry_check_interval_seconds: int = 60
    notice_duration_seconds: int = 3
    display_timezone: str = "America/Sao_Paulo"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def secure_cookies(self) -> bool:
        """Return true when cookies must only travel over HTTPS."""
        return self.environment != "local"
