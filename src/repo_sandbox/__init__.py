# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

"""
repo-sandbox
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import DeployConfig
from .exceptions import (
    BranchLookupError,
    EnumerationError,
    FileFetchError,
    MaterializationError,
    RepoSandboxError,
    SubmissionError,
)
from .materializer import Materializer, RepositoryMaterializer
from .models import DeploymentManifest, FileEntry, FileKind, RepositoryRef, SandboxResult
from .resolver import BranchResolver
from .session import DeploySession

__all__ = [
    "BranchLookupError",
    "BranchResolver",
    "DeployConfig",
    "DeploySession",
    "DeploymentManifest",
    "EnumerationError",
    "FileEntry",
    "FileFetchError",
    "FileKind",
    "MaterializationError",
    "Materializer",
    "RepoSandboxError",
    "RepositoryMaterializer",
    "RepositoryRef",
    "SandboxResult",
    "SubmissionError",
]
