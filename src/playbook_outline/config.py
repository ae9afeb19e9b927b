"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `PLAYBOOK_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Playbook outline settings.

    All fields are environment-configurable. Prefix is `PLAYBOOK_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLAYBOOK_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # Storage; None keeps playbooks in memory only
    data_dir: Path | None = Field(default=None)

    # Editing
    new_node_label: str = Field(default="Nuevo ítem", min_length=1)

    # API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000, ge=1, le=65535)


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("PLAYBOOK_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
