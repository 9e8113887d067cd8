# src/repo_sandbox/models/__init__.py

"""
Data models for repository references and deployment manifests.
"""

from .manifest import DeploymentManifest, FileEntry, FileKind, SandboxResult
from .repository import RepositoryRef

__all__ = ["DeploymentManifest", "FileEntry", "FileKind", "RepositoryRef", "SandboxResult"]
