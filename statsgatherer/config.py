"""Process-wide configuration — env-driven feature flags and sink endpoints.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and STATSGATHERER_* environment variables.
The listener only ever reads these values; nothing in the package writes
them after start-up.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class GathererConfig(BaseSettings):
    """Gatherer configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export STATSGATHERER_PROJECT_INFO_ENABLED=true
        export STATSGATHERER_PROJECT_ENDPOINT=https://stats.example.com/api/projects
        export STATSGATHERER_PUBSUB_ENABLED=true

    Or via .env file::

        STATSGATHERER_LOG_LEVEL=DEBUG
        STATSGATHERER_PUBSUB_URL=redis://redis:6379/0
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STATSGATHERER_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Feature flag: publish item ("project") info at all
    project_info_enabled: bool = False

    # REST sink
    project_endpoint: str = ""
    rest_timeout_seconds: float = 3.0

    # Pub/sub sink
    pubsub_enabled: bool = False
    pubsub_url: str = "redis://localhost:6379/0"
    pubsub_channel: str = "statsgatherer.projects"
    pubsub_timeout_seconds: float = 3.0

    # Structured log sink
    log_sink_enabled: bool = True
    record_logger_name: str = "statsgatherer.records"

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level singleton — import as `from statsgatherer.config import config`
config = GathererConfig()
