from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mo_agent.models.tree import TreeNode


class PendingChange(BaseModel):
    """A file write accepted by the server but not yet committed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_path: str
    content: str


class Session(BaseModel):
    """Stores the state for a single connection."""

    pending_changes: list[PendingChange] = Field(default_factory=list)
    # Last snapshot sent to the peer; only refreshed by writeFile/refreshFileTree.
    directory_structure: list[TreeNode] = Field(default_factory=list)

    def record_change(self, file_path: str, content: str) -> None:
        self.pending_changes.append(PendingChange(file_path=file_path, content=content))

    def clear_pending(self) -> None:
        self.pending_changes = []
