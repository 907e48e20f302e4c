# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Configuration for Hub Redirector."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./hub_redirector.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 4000
    log_level: str = "INFO"
    # Use the first X-Forwarded-For entry as the caller address (only behind a trusted proxy)
    trust_forwarded_for: bool = False

    # Registration: "basic" (printable, length-bounded) or "ed25519"
    key_policy: Literal["basic", "ed25519"] = "basic"
    key_min_length: int = 8
    key_max_length: int = 4096
    # Invite codes created at startup if missing, e.g. BOOTSTRAP_INVITES='["Invite"]'
    bootstrap_invites: list[str] = []

    # Tokens: redraws after a primary key collision
    token_insert_attempts: int = 3

    # Rate limits (requests per minute per client, 0 = unlimited)
    register_rate_limit: int = 5
    token_rate_limit: int = 30


settings = Settings()
