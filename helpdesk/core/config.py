from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration read from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = Field(default="Helpdesk Tickets API")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(asctime)s %(levelname)s %(name)s %(message)s")

    # Ticket rules
    # There is no assignment endpoint yet, so new tickets go to a placeholder agent.
    default_assignee_id: str | None = Field(default="agent-123")
    customer_author_prefix: str | None = Field(default=None)
    enforce_forward_lifecycle: bool = Field(default=False)

    # Observability configuration
    otel_enabled: bool = Field(default=False)
    otel_service_name: str = Field(default="helpdesk-api")
    otel_exporter_otlp_endpoint: str | None = Field(default=None)
    otel_exporter_otlp_headers: str | None = Field(default=None)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the application settings."""

    return Settings()
