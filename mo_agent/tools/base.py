"""Common types shared by the command tools."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

ToolCallArguments = dict[str, Any]


@dataclass
class ToolExecResult:
    """Outcome of one tool execution."""

    output: str | None = None
    error: str | None = None
    error_code: int = 0

    @property
    def ok(self) -> bool:
        return self.error_code == 0 and not self.error


class Tool(ABC):
    """Base class for tools that act on the project root."""

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    @abstractmethod
    def get_name(self) -> str:
        pass

    @abstractmethod
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        pass
