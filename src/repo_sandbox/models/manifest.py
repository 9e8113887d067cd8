# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

"""Data models for the deployment manifest submitted to the sandbox host."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FileKind(str, Enum):
    TEXT = "text"
    BINARY = "binary"


class FileEntry(BaseModel):
    """A single deployable file.

    Text entries carry the decoded file contents. Binary entries carry a URL
    the sandbox host dereferences itself; the bytes are never inlined.
    """

    path: str = Field(..., description="Path relative to the branch root.")
    kind: FileKind
    content: str = Field(..., description="File text, or the asset URL for binary files.")

    @property
    def is_binary(self) -> bool:
        return self.kind is FileKind.BINARY

    def to_payload(self) -> dict[str, Any]:
        return {"content": self.content, "isBinary": self.is_binary}


class DeploymentManifest(BaseModel):
    """The complete set of files submitted to the sandbox host as one unit."""

    files: dict[str, FileEntry] = Field(default_factory=dict)

    def add(self, entry: FileEntry) -> None:
        """Adds an entry keyed by its path.

        Raises:
            ValueError: If an entry for the path already exists.
        """
        if entry.path in self.files:
            raise ValueError(f"Duplicate manifest path: {entry.path}")
        self.files[entry.path] = entry

    def to_payload(self) -> dict[str, Any]:
        """Request body for the sandbox host's define endpoint."""
        return {"files": {path: entry.to_payload() for path, entry in self.files.items()}}


class SandboxResult(BaseModel):
    """Identifier of a sandbox created by the sandbox host."""

    id: str = Field(..., description="Opaque sandbox identifier.")
    embed_url: str | None = Field(None, description="Embeddable viewer URL for the sandbox.")
