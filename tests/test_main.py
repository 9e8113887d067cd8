from typing import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from repo_sandbox.main import deploy_repository, list_branches, main, select_branch, set_repository


@pytest.fixture
def mock_deployer() -> Generator[MagicMock, None, None]:
    with patch("repo_sandbox.main.deployer", new_callable=MagicMock) as mock:
        # Configure methods to be awaitable
        mock.set_repository = AsyncMock()
        mock.list_branches = AsyncMock()
        mock.select_branch = AsyncMock()
        mock.deploy = AsyncMock()
        yield mock


@pytest.mark.asyncio
async def test_set_repository(mock_deployer: MagicMock) -> None:
    mock_deployer.set_repository.return_value = {
        "account": "octocat",
        "repository": "hello-world",
        "lookup_scheduled": True,
    }

    result = await set_repository("sess", "octocat", "hello-world")

    assert result == "Repository set to octocat/hello-world."
    mock_deployer.set_repository.assert_awaited_once_with("sess", "octocat", "hello-world")


@pytest.mark.asyncio
async def test_set_repository_incomplete(mock_deployer: MagicMock) -> None:
    mock_deployer.set_repository.return_value = {"account": "octocat", "repository": "", "lookup_scheduled": False}

    result = await set_repository("sess", "octocat", "")

    assert "Repository incomplete" in result


@pytest.mark.asyncio
async def test_set_repository_exception(mock_deployer: MagicMock) -> None:
    mock_deployer.set_repository.side_effect = ValueError("Session ID is required")

    result = await set_repository("", "octocat", "hello-world")

    assert result == "Error setting repository: Session ID is required"


@pytest.mark.asyncio
async def test_list_branches(mock_deployer: MagicMock) -> None:
    mock_deployer.list_branches.return_value = {"branches": ["master"], "selected": "master"}
    assert await list_branches("sess") == {"branches": ["master"], "selected": "master"}


@pytest.mark.asyncio
async def test_list_branches_exception(mock_deployer: MagicMock) -> None:
    mock_deployer.list_branches.side_effect = Exception("Fail")

    result = await list_branches("sess")

    assert result == {"branches": [], "selected": "", "error": "Error listing branches: Fail"}


@pytest.mark.asyncio
async def test_select_branch(mock_deployer: MagicMock) -> None:
    mock_deployer.select_branch.return_value = "develop"
    assert await select_branch("sess", "develop") == "Branch set to develop."

    mock_deployer.select_branch.return_value = ""
    assert await select_branch("sess", "") == "Branch cleared."


@pytest.mark.asyncio
async def test_deploy_repository(mock_deployer: MagicMock) -> None:
    mock_deployer.deploy.return_value = {
        "sandbox_id": "abc123",
        "embed_url": "https://codesandbox.io/embed/abc123?view=split",
        "embed_html": "<iframe></iframe>",
    }

    result = await deploy_repository("sess", "https://cdn.example.com")

    assert result.splitlines() == [
        "Sandbox ID: abc123",
        "Embed URL: https://codesandbox.io/embed/abc123?view=split",
        "Embed Code:",
        "<iframe></iframe>",
    ]
    mock_deployer.deploy.assert_awaited_once_with("sess", "https://cdn.example.com")


@pytest.mark.asyncio
async def test_deploy_repository_exception(mock_deployer: MagicMock) -> None:
    mock_deployer.deploy.side_effect = Exception("Failed to fetch logo.png")

    result = await deploy_repository("sess")

    assert result == "Error deploying repository: Failed to fetch logo.png"


def test_main_execution() -> None:
    with patch("repo_sandbox.main.mcp.run") as mock_run:
        main()
        mock_run.assert_called_once()
