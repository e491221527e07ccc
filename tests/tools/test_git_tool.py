"""
Unit tests for git_tool.py
"""

import shutil
import subprocess
from unittest.mock import AsyncMock, call, patch

import pytest

from mo_agent.tools.git_tool import GitTool


class TestGitTool:
    """Tests for GitTool with the subprocess layer mocked"""

    @pytest.fixture
    def git_tool(self, tmp_path):
        return GitTool(tmp_path)

    @pytest.mark.asyncio
    async def test_commit_stages_then_commits(self, git_tool, tmp_path):
        with patch("mo_agent.tools.git_tool.run", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = (0, "", "")

            assert await git_tool.commit("add login page") is True

            root = tmp_path.as_posix()
            assert mock_run.await_args_list == [
                call(["git", "-C", root, "add", "."], timeout=None),
                call(["git", "-C", root, "commit", "-m", "feat(mo-2): add login page"], timeout=None),
            ]

    @pytest.mark.asyncio
    async def test_commit_stops_when_staging_fails(self, git_tool):
        with patch("mo_agent.tools.git_tool.run", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = (128, "", "fatal: not a git repository")

            assert await git_tool.commit("summary") is False
            assert mock_run.await_count == 1

    @pytest.mark.asyncio
    async def test_commit_requires_summary(self, git_tool):
        result = await git_tool.execute({"command": "commit"})
        assert result.error_code == 1
        assert "summary" in result.error

    @pytest.mark.asyncio
    async def test_rollback_hard_resets_to_parent(self, git_tool, tmp_path):
        with patch("mo_agent.tools.git_tool.run", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = (0, "HEAD is now at abc123", "")

            assert await git_tool.rollback() is True
            mock_run.assert_awaited_once_with(
                ["git", "-C", tmp_path.as_posix(), "reset", "--hard", "HEAD~1"], timeout=None
            )

    @pytest.mark.asyncio
    async def test_rollback_failure(self, git_tool):
        with patch("mo_agent.tools.git_tool.run", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = (128, "", "fatal: ambiguous argument 'HEAD~1'")
            assert await git_tool.rollback() is False

    @pytest.mark.asyncio
    async def test_unknown_command(self, git_tool):
        result = await git_tool.execute({"command": "push"})
        assert result.error == "Unknown command: push"


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestGitToolRepository:
    """Tests for GitTool against a real repository"""

    @pytest.fixture
    def repo(self, tmp_path):
        def git(*args):
            subprocess.run(["git", "-C", str(tmp_path), *args], check=True, capture_output=True)

        git("init")
        git("config", "user.email", "dev@example.com")
        git("config", "user.name", "Dev")
        (tmp_path / "a.txt").write_text("one")
        git("add", ".")
        git("commit", "-m", "initial")
        return tmp_path

    def _log(self, repo):
        return subprocess.run(
            ["git", "-C", str(repo), "log", "--format=%s"], check=True, capture_output=True, text=True
        ).stdout.splitlines()

    @pytest.mark.asyncio
    async def test_commit_then_rollback(self, repo):
        tool = GitTool(repo)
        (repo / "a.txt").write_text("two")

        assert await tool.commit("change a") is True
        assert self._log(repo) == ["feat(mo-2): change a", "initial"]

        assert await tool.rollback() is True
        assert self._log(repo) == ["initial"]
        assert (repo / "a.txt").read_text() == "one"

    @pytest.mark.asyncio
    async def test_commit_with_nothing_staged_fails(self, repo):
        assert await GitTool(repo).commit("nothing") is False
