"""Central environment-driven settings for the payment gateway service.

Loaded once per process. Behavior is controlled by environment variables (see
`.env.example`).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "paygate"
    log_level: str = "INFO"
    # Deadline for one processor call; 0 disables the deadline.
    processor_timeout_seconds: float = 5.0
    api_key: str | None = None
    otel_exporter_otlp_endpoint: str = ""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = CommonSettings()
