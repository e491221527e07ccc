from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from mo_agent.dispatcher import ActionDispatcher
from mo_agent.tools.bash_tool import BashTool
from mo_agent.tools.git_tool import GitTool
from mo_agent.utils.config import ProjectConfig
from mo_agent.utils.config_store import ConfigStore


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root with a single matched file, src/a.js containing "x"."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "src" / "a.js").write_text("x")
    return root


@pytest.fixture
def git_tool() -> MagicMock:
    tool = MagicMock(spec=GitTool)
    tool.commit = AsyncMock(return_value=True)
    tool.rollback = AsyncMock(return_value=True)
    return tool


@pytest.fixture
def make_dispatcher(git_tool):
    """Builds a dispatcher for a root, with config overrides given as on-disk keys."""

    def _make(root: Path, **overrides) -> ActionDispatcher:
        raw = {"includeList": ["src/**/*.js"], "ignoreList": [], "git": True, "cmd": True}
        raw.update(overrides)
        store = ConfigStore(root / "mo.config.json", ProjectConfig.model_validate(raw))
        return ActionDispatcher(root, store, BashTool(root), git_tool)

    return _make
