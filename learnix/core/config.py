from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Portal settings; every field can be overridden through environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    api_base_url: str = "http://localhost:5000/api"
    api_timeout_seconds: float = 10.0
    database_url: Optional[str] = None
    identity_api_url: str = "https://api.clerk.com/v1"
    identity_secret_key: str = ""
    identity_jwt_key: str = "CHANGE_ME"
    identity_jwt_algorithm: str = "RS256"
    identity_timeout_seconds: float = 5.0
    session_cookie_name: str = "__session"
    login_path: str = "/login"
    not_admin_path: str = "/not-admin"
    default_landing_path: str = "/dashboard"
    user_sync_limit: int = 100
    log_level: str = "INFO"

    @property
    def database_enabled(self) -> bool:
        return bool(self.database_url)


settings = Settings()
