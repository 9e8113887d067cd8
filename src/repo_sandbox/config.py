# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeployConfig(BaseSettings):
    """
    Configuration for the repository deployment pipeline.
    """

    # Source host (read-only)
    source_api_url: str = "https://api.github.com"
    raw_content_url: str = "https://raw.githubusercontent.com"

    # Sandbox host (write)
    sandbox_url: str = "https://codesandbox.io"
    embed_view: str = "split"

    default_branch: str = "master"
    debounce_delay: float = 0.5  # seconds of quiet before a branch lookup
    request_timeout: float = 30.0
    fetch_concurrency: int = Field(default=1, ge=1)

    # Session management
    idle_timeout: float = 300.0  # 5 minutes
    reaper_interval: float = 60.0  # Check every minute

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="REPO_SANDBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
