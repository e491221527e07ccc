from pathlib import Path


class PathConfinementError(PermissionError):
    """Raised when a requested path resolves outside the project root."""


def resolve_path(root: Path, path_str: str) -> Path:
    """
    Resolves a peer-provided path against the project root, ensuring it stays inside it.

    Both traversal segments ("../x") and absolute paths are resolved before the
    check, so either form is rejected when it lands outside the root.

    Args:
        root: The project root directory.
        path_str: The path string provided by the peer, normally relative.

    Returns:
        A resolved absolute Path inside the root.

    Raises:
        PathConfinementError: If the path escapes the root.
    """
    root = root.resolve()
    path = Path(path_str)
    target_path = path if path.is_absolute() else root / path

    resolved_path = target_path.resolve(strict=False)
    if not resolved_path.is_relative_to(root):
        raise PathConfinementError(f"Path '{path_str}' is outside the project root")

    return resolved_path
