# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Configuration management for the USF client."""

import logging
from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .credentials import Credentials

DEFAULT_BASE_URL = "https://api.usfnode.com"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Settings(BaseSettings):
    """Client settings loaded from USF_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="USF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Identity
    authorizer_id: str = ""
    secret: SecretStr = SecretStr("")
    private_key: SecretStr = SecretStr("")

    # Endpoint
    base_url: str = DEFAULT_BASE_URL
    timeout: Optional[float] = None  # None = HTTP library default

    # Behaviour
    silent_return: bool = True

    # Logging
    log_level: str = "INFO"

    def credentials(self) -> Credentials:
        """
        Build the credential store from these settings.

        Raises:
            ConstructionError: If any credential is missing
        """
        return Credentials(
            authorizer_id=self.authorizer_id,
            secret=self.secret.get_secret_value(),
            private_key=self.private_key.get_secret_value(),
        )


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for command line use."""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
    )
