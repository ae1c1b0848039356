"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "StudyFlow Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://postgres@localhost:5432/studyflow"

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    analysis_language: str = "pt-BR"

    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    auth_timeout_seconds: float = 10.0

    max_image_bytes: int = 10 * 1024 * 1024
    guest_cookie_name: str = "guestMode"

    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "studyflow"

    scheduler_enabled: bool = False
    scheduler_timezone: str = "UTC"
    orphan_sweep_enabled: bool = False
    orphan_sweep_interval_minutes: int = 60
    orphan_grace_hours: int = 24
    jobs_run_on_startup: bool = False

    @property
    def auth_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
