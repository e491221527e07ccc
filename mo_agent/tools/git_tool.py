import logging
from pathlib import Path
from typing_extensions import override

from mo_agent.tools.base import Tool, ToolCallArguments, ToolExecResult
from mo_agent.tools.run import CommandTimeoutError, run

logger = logging.getLogger(__name__)

COMMIT_MESSAGE_PREFIX = "feat(mo-2): "


class GitTool(Tool):
    """
    Commits and rolls back the project's working tree.

    Every git invocation is scoped with `git -C <root>` so the process
    working directory is never changed.
    """

    def __init__(self, root: Path, timeout: float | None = None) -> None:
        super().__init__(timeout)
        self._root = root

    @override
    def get_name(self) -> str:
        return "git"

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        command = arguments.get("command")

        match command:
            case "commit":
                summary = arguments.get("summary")
                if not summary or not isinstance(summary, str):
                    return ToolExecResult(error="The 'summary' parameter is required for commit.", error_code=1)
                steps = [
                    ["add", "."],
                    ["commit", "-m", f"{COMMIT_MESSAGE_PREFIX}{summary}"],
                ]
            case "rollback":
                steps = [["reset", "--hard", "HEAD~1"]]
            case _:
                return ToolExecResult(error=f"Unknown command: {command}", error_code=1)

        output = []
        for step in steps:
            logger.debug("[%s] git %s", self.get_name(), " ".join(step))
            try:
                return_code, stdout, stderr = await run(
                    ["git", "-C", self._root.as_posix(), *step], timeout=self._timeout
                )
            except (CommandTimeoutError, OSError) as e:
                return ToolExecResult(output="".join(output), error=str(e), error_code=1)
            output.append(stdout)
            if return_code != 0:
                return ToolExecResult(
                    output="".join(output),
                    error=stderr or f"git {step[0]} exited with {return_code}",
                    error_code=return_code,
                )
        return ToolExecResult(output="".join(output))

    async def commit(self, summary: str) -> bool:
        """Stages everything and commits it. Returns whether both steps succeeded."""
        result = await self.execute({"command": "commit", "summary": summary})
        if result.error_code != 0:
            logger.error("Git commit failed: %s", result.error)
            return False
        logger.info("Git commit successful")
        return True

    async def rollback(self) -> bool:
        """Hard-resets the working tree to the parent of HEAD."""
        result = await self.execute({"command": "rollback"})
        if result.error_code != 0:
            logger.error("Git rollback failed: %s", result.error)
            return False
        logger.info("Git rollback successful")
        return True
