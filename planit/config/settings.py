from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Data access runs with this key; ownership is checked in services

    # Email (Postmark over SMTP). Delivery is skipped when the token is unset.
    postmark_server_token: Optional[str] = None
    smtp_host: str = "smtp.postmarkapp.com"
    smtp_port: int = 587
    smtp_timeout_sec: int = 15
    from_email: str = "invites@planit.golf"

    # App
    app_name: str = "planit-backend"
    app_url: str = "http://localhost:3000"  # Frontend base, used for invite and trip links
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    otp_rate_limit: str = "5/minute"

    # Session cookies
    access_cookie_name: str = "sb-access-token"
    refresh_cookie_name: str = "sb-refresh-token"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def email_configured(self) -> bool:
        return bool(self.postmark_server_token)

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
