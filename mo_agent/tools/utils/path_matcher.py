"""
Resolves include/ignore pattern lists to the files they select.

Include patterns are globs relative to the root ("src/**/*.js"). Wildcards
do not match hidden (dot-prefixed) names; a pattern segment has to start
with "." to select them. Ignore patterns use gitignore syntax, so a bare
name such as "node_modules" excludes that directory wherever it appears and
"src/components/ui" excludes everything below that directory.
"""

import fnmatch
import logging
from pathlib import Path, PurePosixPath

import pathspec

logger = logging.getLogger(__name__)


def build_ignore_spec(ignore_patterns: list[str]) -> pathspec.PathSpec:
    # "#summary" style entries are comments in gitignore syntax; escape them so
    # they still exclude the file of that name.
    lines = [f"\\{p}" if p.startswith("#") else p for p in ignore_patterns]
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def is_hidden_match(rel_path: str, pattern: str) -> bool:
    """True when rel_path has a dot-prefixed segment the pattern does not name explicitly."""
    dot_segments = [p for p in PurePosixPath(pattern).parts if p.startswith(".")]
    for part in PurePosixPath(rel_path).parts:
        if part.startswith(".") and not any(fnmatch.fnmatchcase(part, seg) for seg in dot_segments):
            return True
    return False


def match_pattern(root: Path, pattern: str, ignore_spec: pathspec.PathSpec) -> list[str]:
    """Returns the regular files under root matching one include pattern, minus ignored ones."""
    matches = []
    for path in root.glob(pattern):
        if not path.is_file():
            continue
        rel_path = path.relative_to(root).as_posix()
        if is_hidden_match(rel_path, pattern) or ignore_spec.match_file(rel_path):
            continue
        matches.append(rel_path)
    # Path.glob yields in directory order, which varies by filesystem.
    matches.sort()
    return matches


def resolve(root: Path, include_patterns: list[str], ignore_patterns: list[str]) -> list[str]:
    """
    Resolves the pattern configuration to relative POSIX file paths.

    Each include pattern is matched on its own and filtered by the ignore
    patterns; the per-pattern results are concatenated in include order.
    A file selected by two patterns appears twice.
    """
    ignore_spec = build_ignore_spec(ignore_patterns)
    matched_files: list[str] = []
    for pattern in include_patterns:
        files = match_pattern(root, pattern, ignore_spec)
        logger.debug("Matched %d file(s) for pattern %r: %s", len(files), pattern, files)
        matched_files.extend(files)

    if not matched_files:
        logger.warning("No files matched the include patterns %s", include_patterns)
    return matched_files
