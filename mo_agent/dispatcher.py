"""
Per-connection action handling.

A connection is served by one ActionDispatcher call at a time: the initial
snapshot first, then each decoded message in arrival order. Every handler
returns a structured response; no per-request error escapes to the transport.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

from mo_agent.models.messages import (
    ActionRequest,
    ActionResponse,
    CommitChangesRequest,
    ExecuteCommandRequest,
    InitialSnapshot,
    InitializationCompleteRequest,
    MessageDecodeError,
    RefreshFileTreeRequest,
    RollbackRequest,
    SendAppIdRequest,
    WriteFileRequest,
    decode_action,
)
from mo_agent.models.session import Session
from mo_agent.models.tree import TreeNode
from mo_agent.tools.bash_tool import BashTool
from mo_agent.tools.file_tree import build_tree, iter_file_paths, read_file_text
from mo_agent.tools.git_tool import GitTool
from mo_agent.utils.config import ProjectConfig
from mo_agent.utils.config_store import ConfigStore
from mo_agent.utils.path_utils import PathConfinementError, resolve_path

logger = logging.getLogger(__name__)

GIT_DISABLED_MESSAGE = "Git operations are disabled in the configuration"
COMMAND_DISABLED_MESSAGE = "Command execution is disabled in the configuration"


def strip_backticks(content: str) -> str:
    """Removes one wrapping pair of backticks, if the content has both."""
    if content.startswith("`") and content.endswith("`"):
        return content[1:-1]
    return content


def _write_and_read_back(target: Path, content: str) -> str:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content.encode("utf-8"))
    return read_file_text(target)


class ActionDispatcher:
    """Routes decoded protocol messages to their handlers."""

    def __init__(self, root: Path, config_store: ConfigStore, bash_tool: BashTool, git_tool: GitTool) -> None:
        self.root = root.resolve()
        self.config_store = config_store
        self.bash_tool = bash_tool
        self.git_tool = git_tool

    @property
    def config(self) -> ProjectConfig:
        return self.config_store.config

    async def build_snapshot(self, session: Session) -> list[TreeNode]:
        """Rebuilds the tree from disk and caches it on the session. OSError propagates."""
        tree = await asyncio.to_thread(
            build_tree, self.root, self.config.include_patterns, self.config.ignore_patterns
        )
        session.directory_structure = tree
        return tree

    async def open_session(self, session: Session, server_address: str) -> dict[str, Any]:
        """Builds the payload sent as the first frame of a connection."""
        try:
            tree = await self.build_snapshot(session)
        except (OSError, ValueError) as e:
            logger.error("Error getting directory structure: %s", e)
            return ActionResponse(success=False, message=str(e)).to_wire()

        return InitialSnapshot(
            is_initialized=self.config.is_initialized,
            directory_structure=tree,
            server_address=server_address,
            agent_type=self.config.agent_type,
            start_url=self.config.start_url,
            setting=self.config.setting,
        ).to_wire()

    async def handle_frame(self, session: Session, raw: str | bytes) -> dict[str, Any] | None:
        """Decodes one inbound frame and dispatches it. Returns the reply, or None for no reply."""
        try:
            request = decode_action(raw)
        except MessageDecodeError as e:
            logger.warning("Rejected message: %s", e)
            return ActionResponse(success=False, message="Invalid message", error=str(e)).to_wire()

        if request is None:
            return None

        response = await self.dispatch(session, request)
        return response.to_wire() if response is not None else None

    async def dispatch(self, session: Session, request: ActionRequest) -> ActionResponse | None:
        try:
            match request:
                case WriteFileRequest():
                    return await self._write_file(session, request)
                case CommitChangesRequest():
                    return await self._commit_changes(session, request)
                case RollbackRequest():
                    return await self._rollback()
                case ExecuteCommandRequest():
                    return await self._execute_command(request)
                case RefreshFileTreeRequest():
                    return await self._refresh_file_tree(session)
                case InitializationCompleteRequest():
                    return await self._initialization_complete()
                case SendAppIdRequest():
                    return await self._send_app_id(request)
        except Exception as e:
            logger.error(f"Unexpected error handling '{request.action}': {e}", exc_info=True)
            return ActionResponse(success=False, message=f"Failed to handle '{request.action}'", error=str(e))
        return None

    async def _write_file(self, session: Session, request: WriteFileRequest) -> ActionResponse:
        file_path = request.file_path
        if not file_path:
            return ActionResponse(success=False, message="Missing file path")
        if request.content is None:
            return ActionResponse(success=False, message="Missing file content", file_path=file_path)

        try:
            target = resolve_path(self.root, file_path)
        except PathConfinementError:
            logger.warning("Refused write outside the project root: %s", file_path)
            return ActionResponse(
                success=False,
                message="Cannot access files outside the project root",
                file_path=file_path,
            )

        try:
            written = await asyncio.to_thread(_write_and_read_back, target, strip_backticks(request.content))
            tree = await self.build_snapshot(session)
        except (OSError, ValueError) as e:
            logger.error("File operation failed: %s", file_path, exc_info=True)
            return ActionResponse(
                success=False,
                message="File operation failed",
                error=str(e),
                file_path=file_path,
            )

        session.record_change(file_path, written)
        logger.info("File modified successfully: %s", file_path)
        return ActionResponse(
            success=True,
            message="File modified successfully",
            content=written,
            file_path=file_path,
            directory_structure=tree,
        )

    async def _commit_changes(self, session: Session, request: CommitChangesRequest) -> ActionResponse:
        if not self.config.git_enabled:
            logger.warning(GIT_DISABLED_MESSAGE)
            return ActionResponse(success=False, message=GIT_DISABLED_MESSAGE)
        if not session.pending_changes:
            logger.warning("No pending changes to commit")
            return ActionResponse(success=False, message="No pending changes to commit")
        if not request.summary:
            logger.warning("Missing commit summary")
            return ActionResponse(success=False, message="Missing commit summary")

        if not await self.git_tool.commit(request.summary):
            return ActionResponse(success=False, message="Git commit failed")

        committed = len(session.pending_changes)
        session.clear_pending()
        logger.info("Committed %d pending change(s) to Git", committed)
        return ActionResponse(
            success=True,
            message="All changes committed to Git",
            summary=request.summary,
        )

    async def _rollback(self) -> ActionResponse:
        if not self.config.git_enabled:
            logger.warning(GIT_DISABLED_MESSAGE)
            return ActionResponse(success=False, message=GIT_DISABLED_MESSAGE)

        if await self.git_tool.rollback():
            return ActionResponse(success=True, message="Rolled back to the previous commit")
        return ActionResponse(success=False, message="Rollback failed")

    async def _execute_command(self, request: ExecuteCommandRequest) -> ActionResponse:
        if not self.config.command_exec_enabled:
            logger.warning(COMMAND_DISABLED_MESSAGE)
            return ActionResponse(success=False, message=COMMAND_DISABLED_MESSAGE)
        if not request.command:
            logger.warning("Missing command parameter")
            return ActionResponse(success=False, message="Missing command parameter")

        result = await self.bash_tool.run_shell(request.command)
        if not result.ok:
            logger.error("Command execution failed: %s: %s", request.command, result.error)
            return ActionResponse(success=False, message="Command execution failed", error=result.error)

        logger.info("Command executed successfully: %s", request.command)
        return ActionResponse(success=True, message="Command executed successfully", output=result.output or "")

    async def _refresh_file_tree(self, session: Session) -> ActionResponse:
        try:
            tree = await self.build_snapshot(session)
        except (OSError, ValueError) as e:
            logger.error("Failed to refresh file tree: %s", e)
            return ActionResponse(success=False, message="Failed to refresh file tree", error=str(e))

        if not tree:
            logger.warning("No files or directories found matching the include patterns")
            return ActionResponse(
                success=False,
                message="No files or directories found matching the include patterns",
                directory_structure=[],
            )

        logger.info("File tree refreshed successfully (%d files)", sum(1 for _ in iter_file_paths(tree)))
        return ActionResponse(success=True, message="File tree refreshed successfully", directory_structure=tree)

    async def _initialization_complete(self) -> ActionResponse | None:
        try:
            await asyncio.to_thread(self.config_store.mark_initialized)
        except OSError as e:
            logger.error("Failed to update project initialization status: %s", e)
            return ActionResponse(
                success=False,
                message="Failed to update project initialization status",
                error=str(e),
            )
        logger.info("Project initialization status updated")
        # The peer gets no reply on success.
        return None

    async def _send_app_id(self, request: SendAppIdRequest) -> ActionResponse:
        try:
            await asyncio.to_thread(self.config_store.register_app, request.app_id)
        except OSError as e:
            logger.error("Failed to write appId to configuration: %s", e)
            return ActionResponse(success=False, message="Failed to write appId to configuration", error=str(e))
        logger.info("Project initialization marked as complete, appId written to config")
        return ActionResponse(
            success=True,
            message="Project initialization marked as complete, appId written to config",
        )
