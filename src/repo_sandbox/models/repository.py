# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

from pydantic import BaseModel, ConfigDict, Field


class RepositoryRef(BaseModel):
    """Identifies a repository on the source host."""

    model_config = ConfigDict(frozen=True)

    account: str = Field("", description="The owning user or organisation.")
    repository: str = Field("", description="The repository name.")

    @property
    def is_complete(self) -> bool:
        """Whether both account and repository are set."""
        return bool(self.account and self.repository)

    def __str__(self) -> str:
        return f"{self.account}/{self.repository}"
