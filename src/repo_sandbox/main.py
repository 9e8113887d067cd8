# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

from typing import Any

from mcp.server.fastmcp import FastMCP

from repo_sandbox.mcp import DeployMCP
from repo_sandbox.utils.logger import logger

# Initialize Deploy Logic
deployer = DeployMCP()

# Initialize MCP Server
mcp = FastMCP("repo-sandbox")


@mcp.tool()  # type: ignore[misc]
async def set_repository(session_id: str, account: str, repository: str) -> str:
    """
    Select the repository to deploy. Its branches are looked up in the background.
    """
    try:
        result = await deployer.set_repository(session_id, account, repository)
    except Exception as e:
        return f"Error setting repository: {e!s}"

    if not result["account"] or not result["repository"]:
        return "Repository incomplete. Both account and repository are required."
    return f"Repository set to {result['account']}/{result['repository']}."


@mcp.tool()  # type: ignore[misc]
async def list_branches(session_id: str) -> dict[str, Any]:
    """
    List the branches of the selected repository and the currently selected branch.
    """
    try:
        return await deployer.list_branches(session_id)
    except Exception as e:
        return {"branches": [], "selected": "", "error": f"Error listing branches: {e!s}"}


@mcp.tool()  # type: ignore[misc]
async def select_branch(session_id: str, branch: str) -> str:
    """
    Select the branch to deploy.
    """
    try:
        selected = await deployer.select_branch(session_id, branch)
    except Exception as e:
        return f"Error selecting branch: {e!s}"
    return f"Branch set to {selected}." if selected else "Branch cleared."


@mcp.tool()  # type: ignore[misc]
async def deploy_repository(session_id: str, binary_base_url: str = "") -> str:
    """
    Deploy the selected repository branch to a new sandbox.
    Returns the sandbox ID, the embed URL and the iframe markup.
    """
    try:
        result = await deployer.deploy(session_id, binary_base_url)
    except Exception as e:
        logger.error(f"deploy_repository failed for session {session_id}: {e}")
        return f"Error deploying repository: {e!s}"

    return "\n".join(
        [
            f"Sandbox ID: {result['sandbox_id']}",
            f"Embed URL: {result['embed_url']}",
            "Embed Code:",
            result["embed_html"] or "",
        ]
    )


def main() -> None:
    """Entry point for the MCP server."""
    mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
