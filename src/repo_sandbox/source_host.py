# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

from urllib.parse import quote

import httpx
from loguru import logger

from repo_sandbox.config import DeployConfig
from repo_sandbox.exceptions import BranchLookupError, EnumerationError, FileFetchError
from repo_sandbox.models import RepositoryRef

ACCEPT_HEADERS = {"Accept": "application/vnd.github+json"}


class SourceHostClient:
    """Read-only client for the version-control host.

    Consumes the branch listing, the recursive tree listing and the raw
    content host. Requests are unauthenticated.
    """

    def __init__(self, client: httpx.AsyncClient, config: DeployConfig | None = None):
        """Initializes the SourceHostClient.

        Args:
            client: The httpx.AsyncClient used for all requests.
            config: Configuration holding the host URLs.
        """
        self.config = config or DeployConfig()
        self._client = client

    @property
    def api_url(self) -> str:
        return self.config.source_api_url.rstrip("/")

    def raw_content_url(
        self, account: str, repository: str, branch: str, path: str, host: str | None = None
    ) -> str:
        """Builds the raw content URL of a file.

        Args:
            account: The repository owner.
            repository: The repository name.
            branch: The branch name.
            path: The branch-root-relative file path.
            host: Replaces the raw content host when given.

        Returns:
            str: `{host}/{account}/{repository}/{branch}/{path}`.
        """
        root = (host or self.config.raw_content_url).rstrip("/")
        return f"{root}/{account}/{repository}/{quote(branch)}/{quote(path)}"

    async def list_branches(self, ref: RepositoryRef) -> list[str]:
        """Lists the branch names of a repository in host order.

        Raises:
            BranchLookupError: If the request fails or the body is malformed.
        """
        url = f"{self.api_url}/repos/{ref.account}/{ref.repository}/branches"
        try:
            response = await self._client.get(url, headers=ACCEPT_HEADERS, params={"per_page": 100})
            response.raise_for_status()
            return [branch["name"] for branch in response.json()]
        except httpx.HTTPError as e:
            raise BranchLookupError(f"Branch lookup for {ref} failed: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            raise BranchLookupError(f"Malformed branch listing for {ref}: {e}") from e

    async def list_blob_paths(self, account: str, repository: str, branch: str) -> list[str]:
        """Lists every file path of a branch, recursively, in tree order.

        Directory and submodule entries are skipped.

        Raises:
            EnumerationError: If the tree request fails or the body is malformed.
        """
        url = f"{self.api_url}/repos/{account}/{repository}/git/trees/{quote(branch)}"
        try:
            response = await self._client.get(url, headers=ACCEPT_HEADERS, params={"recursive": 1})
            response.raise_for_status()
            tree = response.json()["tree"]
            paths = [entry["path"] for entry in tree if entry.get("type") == "blob"]
        except httpx.HTTPError as e:
            raise EnumerationError(f"Failed to list files of {account}/{repository}@{branch}: {e}") from e
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise EnumerationError(f"Malformed tree for {account}/{repository}@{branch}: {e}") from e

        logger.debug(f"Found {len(paths)} files in {account}/{repository}@{branch}")
        return paths

    async def fetch_file(self, account: str, repository: str, branch: str, path: str) -> httpx.Response:
        """Fetches the raw content of a file.

        Raises:
            FileFetchError: If the request fails. Carries the file path.
        """
        url = self.raw_content_url(account, repository, branch, path)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise FileFetchError(path, f"Failed to fetch {path}: {e}") from e
        return response
