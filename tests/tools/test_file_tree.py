"""
Unit tests for file_tree.py
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from mo_agent.models.tree import DirectoryNode, FileNode
from mo_agent.tools.file_tree import build_tree, iter_file_paths


class TestBuildTree:
    """Tests for the snapshot tree builder"""

    @pytest.fixture
    def root(self, tmp_path: Path) -> Path:
        for rel, content in {
            "src/a.js": "x",
            "src/lib/b.js": "b",
            "src/lib/deep/c.js": "c",
            "other/d.js": "d",
        }.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return tmp_path

    def test_single_file_nests_under_its_directory(self, root):
        tree = build_tree(root, ["src/a.js"], [])
        assert tree == [DirectoryNode(name="src", children=[FileNode(name="a.js", content="x")])]

    def test_shared_prefixes_collapse_into_one_directory(self, root):
        tree = build_tree(root, ["src/**/*.js"], [])
        assert [node.name for node in tree] == ["src"]
        assert dict(iter_file_paths(tree)) == {
            "src/a.js": "x",
            "src/lib/b.js": "b",
            "src/lib/deep/c.js": "c",
        }

    def test_overlapping_patterns_insert_each_file_once(self, root):
        tree = build_tree(root, ["src/**/*.js", "src/lib/*.js"], [])
        paths = [path for path, _ in iter_file_paths(tree)]
        assert sorted(paths) == ["src/a.js", "src/lib/b.js", "src/lib/deep/c.js"]

    def test_root_is_a_sequence_of_top_level_nodes(self, root):
        tree = build_tree(root, ["src/a.js", "other/*.js"], [])
        assert [node.name for node in tree] == ["src", "other"]

    def test_rebuild_is_structurally_identical(self, root):
        first = build_tree(root, ["**/*.js"], [])
        second = build_tree(root, ["**/*.js"], [])
        assert dict(iter_file_paths(first)) == dict(iter_file_paths(second))
        assert first == second

    def test_serializes_with_type_discriminator(self, root):
        tree = build_tree(root, ["src/a.js"], [])
        assert tree[0].model_dump() == {
            "name": "src",
            "type": "directory",
            "children": [{"name": "a.js", "type": "file", "content": "x"}],
        }

    def test_unreadable_file_fails_the_build(self, root):
        with patch("mo_agent.tools.file_tree.read_file_text", side_effect=PermissionError("denied")):
            with pytest.raises(PermissionError):
                build_tree(root, ["src/a.js"], [])

    def test_line_endings_are_preserved(self, root):
        (root / "src" / "crlf.js").write_bytes(b"l1\r\nl2\rl3")
        tree = build_tree(root, ["src/crlf.js"], [])
        assert dict(iter_file_paths(tree)) == {"src/crlf.js": "l1\r\nl2\rl3"}

    def test_empty_match_builds_empty_tree(self, root):
        assert build_tree(root, ["nothing/**"], []) == []
