import logging
from pathlib import Path
from typing_extensions import override

from mo_agent.tools.base import Tool, ToolCallArguments, ToolExecResult
from mo_agent.tools.run import CommandTimeoutError, run

logger = logging.getLogger(__name__)


class BashTool(Tool):
    """
    Runs shell commands in the project root.

    Any output on stderr counts as a failure even when the exit code is zero;
    callers rely on that to surface warnings from build tools.
    """

    def __init__(self, root: Path, timeout: float | None = None) -> None:
        super().__init__(timeout)
        self._root = root

    @override
    def get_name(self) -> str:
        return "bash"

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        command = arguments.get("command")
        if not command or not isinstance(command, str):
            return ToolExecResult(error="The 'command' parameter is required.", error_code=-1)

        logger.info("[%s] Running command: %s", self.get_name(), command)
        try:
            return_code, stdout, stderr = await run(command, cwd=self._root, timeout=self._timeout)
        except CommandTimeoutError as e:
            return ToolExecResult(error=str(e), error_code=-1)
        except OSError as e:
            return ToolExecResult(error=f"Failed to start command: {e}", error_code=-1)

        if return_code != 0:
            message = f"Command failed with exit code {return_code}: {command}"
            if stderr:
                message = f"{message}\n{stderr}"
            return ToolExecResult(output=stdout, error=message, error_code=return_code)
        if stderr:
            return ToolExecResult(output=stdout, error=f"Command reported errors: {stderr}", error_code=1)
        return ToolExecResult(output=stdout)

    async def run_shell(self, command: str) -> ToolExecResult:
        return await self.execute({"command": command})
