# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

import asyncio
import time

import anyio
import httpx
from loguru import logger

from repo_sandbox.config import DeployConfig
from repo_sandbox.exceptions import MaterializationError
from repo_sandbox.models import DeploymentManifest, FileEntry, FileKind, SandboxResult
from repo_sandbox.sandbox_host import SandboxHostClient
from repo_sandbox.source_host import SourceHostClient

TEXT_CONTENT_PREFIX = "text/"


class RepositoryMaterializer:
    """Async-native deployment pipeline (The Core).

    Turns a branch of a repository into a sandbox: enumerates the files,
    fetches and classifies each one, and submits the manifest in one request.
    A failure anywhere aborts the whole run; nothing is submitted partially.
    """

    def __init__(
        self,
        config: DeployConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initializes the RepositoryMaterializer.

        Args:
            config: Configuration for the source and sandbox hosts.
            client: Optional httpx.AsyncClient for connection pooling.
        """
        self.config = config or DeployConfig()
        self._internal_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.config.request_timeout)
        self.source = SourceHostClient(self._client, self.config)
        self.sandbox_host = SandboxHostClient(self._client, self.config)

    async def __aenter__(self) -> "RepositoryMaterializer":
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Closes the HTTP client if it was created internally."""
        await self.aclose()

    async def aclose(self) -> None:
        if self._internal_client:
            await self._client.aclose()

    async def deploy(
        self,
        account: str,
        repository: str,
        branch: str,
        binary_base_url: str | None = None,
    ) -> SandboxResult | None:
        """Deploys a branch of a repository to a new sandbox.

        Args:
            account: The repository owner.
            repository: The repository name.
            branch: The branch to deploy.
            binary_base_url: Host serving binary files to the sandbox. Defaults
                to the raw content host.

        Returns:
            SandboxResult | None: The created sandbox, or None when any of
            account, repository or branch is empty.

        Raises:
            EnumerationError: If the file tree cannot be listed.
            FileFetchError: If any file cannot be fetched.
            SubmissionError: If the sandbox host rejects the manifest.
        """
        if not account or not repository or not branch:
            return None

        logger.info(
            "Deploying repository",
            account=account,
            repository=repository,
            branch=branch,
        )
        start_time = time.time()
        try:
            manifest = await self.build_manifest(account, repository, branch, binary_base_url)
            result = await self.sandbox_host.define(manifest)
        except MaterializationError as e:
            logger.error(f"Deployment of {account}/{repository}@{branch} failed: {e}")
            raise

        logger.info(
            f"Deployed {len(manifest.files)} files to sandbox {result.id} in {time.time() - start_time:.2f}s"
        )
        return result

    async def build_manifest(
        self,
        account: str,
        repository: str,
        branch: str,
        binary_base_url: str | None = None,
    ) -> DeploymentManifest:
        """Builds the manifest of a branch without submitting it.

        Raises:
            EnumerationError: If the file tree cannot be listed.
            FileFetchError: If any file cannot be fetched.
        """
        paths = await self.source.list_blob_paths(account, repository, branch)

        if self.config.fetch_concurrency > 1 and len(paths) > 1:
            entries = await self._fetch_bounded(account, repository, branch, paths, binary_base_url)
        else:
            entries = [
                await self._fetch_entry(account, repository, branch, path, binary_base_url) for path in paths
            ]

        manifest = DeploymentManifest()
        for entry in entries:
            manifest.add(entry)
        return manifest

    async def _fetch_bounded(
        self,
        account: str,
        repository: str,
        branch: str,
        paths: list[str],
        binary_base_url: str | None,
    ) -> list[FileEntry]:
        semaphore = asyncio.Semaphore(self.config.fetch_concurrency)

        async def fetch(path: str) -> FileEntry:
            async with semaphore:
                return await self._fetch_entry(account, repository, branch, path, binary_base_url)

        tasks = [asyncio.create_task(fetch(path)) for path in paths]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # First failure aborts the rest
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _fetch_entry(
        self,
        account: str,
        repository: str,
        branch: str,
        path: str,
        binary_base_url: str | None,
    ) -> FileEntry:
        response = await self.source.fetch_file(account, repository, branch, path)
        content_type = response.headers.get("content-type", "")

        if content_type.startswith(TEXT_CONTENT_PREFIX):
            return FileEntry(path=path, kind=FileKind.TEXT, content=response.text)

        asset_url = self.source.raw_content_url(account, repository, branch, path, host=binary_base_url or None)
        return FileEntry(path=path, kind=FileKind.BINARY, content=asset_url)


class Materializer:
    """Sync Facade for RepositoryMaterializer (The Facade).

    Each call runs a fresh RepositoryMaterializer via anyio.run.
    """

    def __init__(self, config: DeployConfig | None = None):
        self.config = config or DeployConfig()

    def deploy(
        self,
        account: str,
        repository: str,
        branch: str,
        binary_base_url: str | None = None,
    ) -> SandboxResult | None:
        """Deploys a branch of a repository synchronously.

        See RepositoryMaterializer.deploy.
        """
        return anyio.run(self._deploy, account, repository, branch, binary_base_url)

    async def _deploy(
        self,
        account: str,
        repository: str,
        branch: str,
        binary_base_url: str | None,
    ) -> SandboxResult | None:
        async with RepositoryMaterializer(self.config) as materializer:
            return await materializer.deploy(account, repository, branch, binary_base_url)
