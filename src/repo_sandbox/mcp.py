from typing import Any

import httpx
from loguru import logger

from repo_sandbox.config import DeployConfig
from repo_sandbox.session_manager import SessionManager


class DeployMCP:
    """
    MCP-compliant server logic wrapper for repo-sandbox.
    Exposes deploy sessions as tools for the Agent.
    """

    def __init__(self, config: DeployConfig | None = None, client: httpx.AsyncClient | None = None):
        self.config = config or DeployConfig()
        self.session_manager = SessionManager(self.config, client)

    async def set_repository(self, session_id: str, account: str, repository: str) -> dict[str, Any]:
        """
        Point the session at a repository. Branches are looked up in the background.
        """
        session = await self.session_manager.get_or_create_session(session_id)
        session.set_repository_ref(account, repository)
        return {
            "account": session.ref.account,
            "repository": session.ref.repository,
            "lookup_scheduled": session.resolver.busy,
        }

    async def list_branches(self, session_id: str) -> dict[str, Any]:
        """
        Wait for pending branch lookups, then return the branch list and the selection.
        """
        session = await self.session_manager.get_or_create_session(session_id)
        await session.resolver.settle()
        return {"branches": list(session.branches), "selected": session.branch}

    async def select_branch(self, session_id: str, branch: str) -> str:
        session = await self.session_manager.get_or_create_session(session_id)
        session.set_branch(branch)
        return session.branch

    async def deploy(self, session_id: str, binary_base_url: str = "") -> dict[str, Any]:
        """
        Deploy the session's repository and branch to a new sandbox.
        """
        session = await self.session_manager.get_or_create_session(session_id)
        await session.resolver.settle()
        # An empty value falls back to the raw content host
        session.set_binary_base_url(binary_base_url)

        if not session.ref.is_complete or not session.branch:
            raise ValueError("Account, repository and branch are required")
        if session.busy:
            raise RuntimeError("A deployment is already in progress for this session")

        result = await session.deploy()
        if result is None:  # pragma: no cover
            raise RuntimeError("Deployment was skipped")

        logger.info(f"Session {session_id} deployed sandbox {result.id}")
        return {
            "sandbox_id": result.id,
            "embed_url": result.embed_url,
            "embed_html": session.embed_html,
        }

    async def shutdown(self) -> None:
        await self.session_manager.shutdown()
