"""Builds the nested directory snapshot sent to the peer."""

import logging
from collections.abc import Iterator
from pathlib import Path

from mo_agent.models.tree import DirectoryNode, FileNode, TreeNode
from mo_agent.tools.utils import path_matcher

logger = logging.getLogger(__name__)


class _Level:
    """
    One directory level while the tree is being assembled.

    Nodes are keyed by segment name for constant-time lookup; dicts keep
    insertion order, which becomes the order of first discovery.
    """

    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.dirs: dict[str, "_Level"] = {}
        self.order: list[tuple[str, bool]] = []

    def add_file(self, name: str, content: str) -> None:
        if name in self.files or name in self.dirs:
            return
        self.files[name] = content
        self.order.append((name, False))

    def child_dir(self, name: str) -> "_Level | None":
        if name in self.files:
            return None
        if name not in self.dirs:
            self.dirs[name] = _Level()
            self.order.append((name, True))
        return self.dirs[name]

    def to_nodes(self) -> list[TreeNode]:
        nodes: list[TreeNode] = []
        for name, is_dir in self.order:
            if is_dir:
                nodes.append(DirectoryNode(name=name, children=self.dirs[name].to_nodes()))
            else:
                nodes.append(FileNode(name=name, content=self.files[name]))
        return nodes


def read_file_text(path: Path) -> str:
    # Decoded from raw bytes so line endings survive unchanged; undecodable
    # bytes are replaced rather than failing the whole snapshot.
    return path.read_bytes().decode("utf-8", errors="replace")


def build_tree(root: Path, include_patterns: list[str], ignore_patterns: list[str]) -> list[TreeNode]:
    """
    Builds a fresh snapshot of every matched file under root.

    Returns:
        The top-level nodes. There is no implicit root node.

    Raises:
        OSError: If a matched file cannot be read.
    """
    top = _Level()
    for rel_path in path_matcher.resolve(root, include_patterns, ignore_patterns):
        *dir_parts, file_name = rel_path.split("/")
        level: _Level | None = top
        for part in dir_parts:
            level = level.child_dir(part)
            if level is None:
                break
        if level is None or file_name in level.files:
            continue
        level.add_file(file_name, read_file_text(root / rel_path))

    return top.to_nodes()


def iter_file_paths(nodes: list[TreeNode], prefix: str = "") -> Iterator[tuple[str, str]]:
    """Yields (relative path, content) for every file node, depth first."""
    for node in nodes:
        path = f"{prefix}{node.name}"
        if isinstance(node, DirectoryNode):
            yield from iter_file_paths(node.children, f"{path}/")
        else:
            yield path, node.content
