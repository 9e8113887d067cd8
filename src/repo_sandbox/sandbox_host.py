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
from repo_sandbox.embed import embed_url
from repo_sandbox.exceptions import SubmissionError
from repo_sandbox.models import DeploymentManifest, SandboxResult

DEFINE_PATH = "/api/v1/sandboxes/define"


class SandboxHostClient:
    """Write client for the sandboxing service."""

    def __init__(self, client: httpx.AsyncClient, config: DeployConfig | None = None):
        self.config = config or DeployConfig()
        self._client = client

    async def define(self, manifest: DeploymentManifest) -> SandboxResult:
        """Creates a sandbox from a manifest.

        Args:
            manifest: The complete manifest. Submitted as one request.

        Returns:
            SandboxResult: The identifier of the created sandbox.

        Raises:
            SubmissionError: If the request fails or no sandbox_id comes back.
        """
        host = self.config.sandbox_url.rstrip("/")
        try:
            response = await self._client.post(
                f"{host}{DEFINE_PATH}",
                params={"json": 1},
                json=manifest.to_payload(),
            )
            response.raise_for_status()
            sandbox_id = response.json()["sandbox_id"]
        except httpx.HTTPError as e:
            raise SubmissionError(f"Sandbox creation failed: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            raise SubmissionError(f"Sandbox host returned no sandbox_id: {e}") from e

        if not isinstance(sandbox_id, str) or not sandbox_id:
            raise SubmissionError(f"Sandbox host returned an invalid sandbox_id: {sandbox_id!r}")

        logger.info(f"Sandbox created: {sandbox_id}")
        return SandboxResult(id=sandbox_id, embed_url=embed_url(host, sandbox_id, self.config.embed_view))
