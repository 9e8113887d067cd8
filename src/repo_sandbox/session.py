# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

import httpx
from loguru import logger

from repo_sandbox.config import DeployConfig
from repo_sandbox.embed import render_iframe
from repo_sandbox.materializer import RepositoryMaterializer
from repo_sandbox.models import RepositoryRef, SandboxResult
from repo_sandbox.resolver import BranchResolver


class DeploySession:
    """Shared state of one deployment workflow.

    Holds the repository reference, the branch resolver, the binary asset
    host and the last sandbox result. Any change to the repository or the
    selected branch clears the sandbox result. Deployments are not
    re-entrant: a deploy requested while one is running is skipped.
    """

    def __init__(self, config: DeployConfig | None = None, client: httpx.AsyncClient | None = None):
        """Initializes the DeploySession.

        Args:
            config: Configuration for the pipeline.
            client: Optional httpx.AsyncClient shared with other sessions.
        """
        self.config = config or DeployConfig()
        self.materializer = RepositoryMaterializer(self.config, client)
        self.resolver = BranchResolver(
            self.materializer.source,
            self.config,
            on_selection_changed=self._on_selection_changed,
        )
        self.ref = RepositoryRef()
        self.binary_base_url = ""
        self.sandbox_result: SandboxResult | None = None
        self.busy = False

    @property
    def branches(self) -> list[str]:
        return self.resolver.branches

    @property
    def branch(self) -> str:
        return self.resolver.selected_branch

    @property
    def embed_url(self) -> str | None:
        return self.sandbox_result.embed_url if self.sandbox_result else None

    @property
    def embed_html(self) -> str | None:
        url = self.embed_url
        return render_iframe(url) if url else None

    def set_account(self, account: str) -> None:
        self._set_ref(RepositoryRef(account=account.strip(), repository=self.ref.repository))

    def set_repository(self, repository: str) -> None:
        self._set_ref(RepositoryRef(account=self.ref.account, repository=repository.strip()))

    def set_repository_ref(self, account: str, repository: str) -> None:
        self._set_ref(RepositoryRef(account=account.strip(), repository=repository.strip()))

    def set_branch(self, branch: str) -> None:
        self.sandbox_result = None
        self.resolver.select_branch(branch)

    def set_binary_base_url(self, url: str) -> None:
        self.binary_base_url = url.strip()

    async def deploy(self) -> SandboxResult | None:
        """Deploys the current repository and branch.

        Returns:
            SandboxResult | None: The new sandbox, or None when skipped.

        Raises:
            MaterializationError: If the deployment fails. The sandbox result
                stays unset.
        """
        if self.busy:
            logger.warning("Deployment already in progress. Ignoring request.")
            return None

        ref, branch = self.ref, self.branch
        self.busy = True
        self.sandbox_result = None
        try:
            result = await self.materializer.deploy(
                ref.account,
                ref.repository,
                branch,
                self.binary_base_url or None,
            )
        finally:
            self.busy = False

        if ref != self.ref or branch != self.branch:
            logger.info("Repository or branch changed during deployment. Discarding result.")
            return result

        self.sandbox_result = result
        return result

    async def aclose(self) -> None:
        await self.resolver.aclose()
        await self.materializer.aclose()

    def _set_ref(self, ref: RepositoryRef) -> None:
        if ref == self.ref:
            return
        self.ref = ref
        self.sandbox_result = None
        self.resolver.on_repository_ref_changed(ref)

    def _on_selection_changed(self, branch: str) -> None:
        self.sandbox_result = None
