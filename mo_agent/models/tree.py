from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class FileNode(BaseModel):
    """A matched file together with its full text content."""

    name: str
    type: Literal["file"] = "file"
    content: str


class DirectoryNode(BaseModel):
    """A directory implied by the path segments of matched files."""

    name: str
    type: Literal["directory"] = "directory"
    children: list["TreeNode"] = Field(default_factory=list)


TreeNode = Annotated[Union[FileNode, DirectoryNode], Field(discriminator="type")]

DirectoryNode.model_rebuild()
