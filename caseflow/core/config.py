"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. The database URL is only required when a session is
requested, so importing the package never fails on missing env.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    Channel credentials are optional; an unconfigured channel falls back to
    the log-only sender (email) or a logged no-op (SMS).
    """

    # App
    app_name: str = "caseflow"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (postgresql+asyncpg://... in production)
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # External channels
    channel_timeout_seconds: float = 10.0

    sendgrid_api_key: SecretStr | None = None
    sendgrid_api_url: str = "https://api.sendgrid.com/v3/mail/send"
    email_from_address: str = "noreply@caseflow.local"
    email_from_name: str = "Caseflow"

    twilio_account_sid: str | None = None
    twilio_auth_token: SecretStr | None = None
    twilio_phone_number: str | None = None
    twilio_api_url: str = "https://api.twilio.com/2010-04-01"

    slack_api_url: str = "https://slack.com/api"
    graph_api_url: str = "https://graph.microsoft.com/v1.0"

    # Deferred step sweep
    sweep_batch_size: int = 100
    sweep_interval_seconds: int = 60
    # Claims older than this are marked failed (never re-run).
    sweep_stale_claim_minutes: int = 30

    # Tables the assign_to_user action may write to.
    assignable_entity_tables: str = (
        "task,legal_case,discovery_request,document,calendar_event"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "Settings":
        """Reject non-positive timeouts and sweep sizes."""
        if self.channel_timeout_seconds <= 0:
            raise ValueError(
                f"channel_timeout_seconds must be > 0, got {self.channel_timeout_seconds}"
            )
        if self.sweep_batch_size < 1:
            raise ValueError(
                f"sweep_batch_size must be >= 1, got {self.sweep_batch_size}"
            )
        if self.sweep_interval_seconds < 1:
            raise ValueError(
                f"sweep_interval_seconds must be >= 1, got {self.sweep_interval_seconds}"
            )
        if self.sweep_stale_claim_minutes < 1:
            raise ValueError(
                "sweep_stale_claim_minutes must be >= 1, "
                f"got {self.sweep_stale_claim_minutes}"
            )
        return self

    @property
    def assignable_tables(self) -> frozenset[str]:
        """Whitelisted table names for assign_to_user."""
        return frozenset(
            t.strip() for t in self.assignable_entity_tables.split(",") if t.strip()
        )

    @property
    def sms_configured(self) -> bool:
        """True when all Twilio credentials are present."""
        return bool(
            self.twilio_account_sid
            and self.twilio_auth_token
            and self.twilio_auth_token.get_secret_value()
            and self.twilio_phone_number
        )

    @property
    def email_configured(self) -> bool:
        """True when a SendGrid API key is present."""
        return bool(
            self.sendgrid_api_key and self.sendgrid_api_key.get_secret_value()
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
