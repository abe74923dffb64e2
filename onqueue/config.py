"""Application settings loaded from environment variables."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Onqueue configuration. All values come from ONQUEUE_* environment variables."""

    # Persistence
    queue_file: Path = Field(default=Path("queue.yml"))

    # HTTP gateway
    http_host: str = Field(default="0.0.0.0")
    http_port: int = Field(default=8080, gt=0, lt=65536)

    # Runner
    tick_interval_seconds: float = Field(default=10.0, gt=0)
    retry_delay_seconds: float = Field(default=5.0, ge=0)
    max_retries: int = Field(default=3, gt=0)
    pop_order: str = Field(default="fifo", pattern="^(fifo|legacy)$")

    # Shell used to run commands (empty → platform default shell)
    shell: str = Field(default="")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="ONQUEUE_",
        env_file=_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def get_shell(self) -> str | None:
        """Return the configured shell executable, or None for the platform default."""
        shell = self.shell.strip()
        return shell or None


settings = Settings()
