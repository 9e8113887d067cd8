# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

"""Error taxonomy for branch lookups and repository deployments."""


class RepoSandboxError(Exception):
    """Base class for all repo-sandbox errors."""


class BranchLookupError(RepoSandboxError):
    """Branch enumeration failed or was aborted.

    Absorbed by the BranchResolver, which resets its branch state.
    """


class MaterializationError(RepoSandboxError):
    """A deployment run failed. Terminal for that run."""


class EnumerationError(MaterializationError):
    """The branch file tree could not be fetched."""


class FileFetchError(MaterializationError):
    """The raw content of a single file could not be fetched."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Failed to fetch {path}")


class SubmissionError(MaterializationError):
    """The sandbox host rejected or never received the manifest."""
