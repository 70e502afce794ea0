"""Path algebra and XDG-compliant application paths.

The path algebra functions are purely textual: they never touch the disk
and work identically for paths that do not exist. Platform conventions
(separators, case sensitivity, invalid characters) come from an explicit
Platform value, defaulting to the host.

XDG defaults:
- Config: ~/.config/treewright/
- State: ~/.local/state/treewright/
"""

import os
from pathlib import Path

from treewright.core.errors import InvalidArgumentError, InvalidPathError
from treewright.core.platform import Platform

# Application identifier for directory naming
APP_NAME = "treewright"


# =============================================================================
# Path algebra
# =============================================================================


def resolve_path(root: str, relative: str, platform: Platform | None = None) -> str:
    """Resolve a relative path against a root without escaping the root.

    ``.`` components are dropped and every ``..`` cancels the nearest
    preceding real component. The result is always the root or one of its
    descendants.

    Examples:
        resolve_path("/a", "b/../c") -> "/a/c"
        resolve_path("/a", "../x") -> InvalidPathError

    Args:
        root: Rooted path to resolve against.
        relative: Non-rooted path to resolve.
        platform: Path conventions to apply. Defaults to the host.

    Returns:
        The collapsed, rooted path using the platform's separator.

    Raises:
        InvalidArgumentError: If an argument is empty, ``root`` is not rooted,
            or ``relative`` is rooted or contains invalid characters.
        InvalidPathError: If ``relative`` climbs above ``root``.
    """
    platform = platform or Platform.current()
    if not root:
        raise InvalidArgumentError("root must not be empty")
    if not relative:
        raise InvalidArgumentError("relative must not be empty")

    if not platform.is_rooted(root):
        raise InvalidArgumentError(f"{root} should be a rooted path.")

    if any(c in platform.invalid_path_chars for c in relative):
        raise InvalidArgumentError(f"{relative} contains invalid path characters.")
    if any(c in platform.invalid_filename_chars for c in platform.file_name(relative)):
        raise InvalidArgumentError(f"{relative} contains invalid folder name characters.")
    if platform.is_rooted(relative):
        raise InvalidArgumentError(f"{relative} can not be a rooted path.")

    alt = platform.alt_sep
    root = root.replace(platform.sep, alt)
    relative = relative.replace(platform.sep, alt)
    combined = f"{root}{alt}{relative}"

    # The relative part is collapsed on its own so it can never cancel
    # components of the root.
    root_segments, root_skip = _collapse(root.split(alt))
    relative_segments, relative_skip = _collapse(relative.split(alt))
    if root_skip > 0 or relative_skip > 0:
        raise InvalidPathError(f"The file path {combined} is invalid")
    segments = root_segments + relative_segments

    if platform.is_windows:
        if not segments:
            raise InvalidPathError(f"The file path {combined} is invalid")
        if len(segments) > 1:
            return platform.sep.join(segments)
        return segments[0] + platform.sep
    return platform.sep + platform.sep.join(segments)


def _collapse(components: list[str]) -> tuple[list[str], int]:
    """Collapse ``.`` and ``..`` components.

    Components are visited last to first: a ``..`` adds a pending skip and
    the next real component consumes one.

    Returns:
        The surviving components in order and the number of ``..`` that
        found nothing to cancel.
    """
    kept: list[str] = []
    skip = 0
    for segment in reversed(components):
        if not segment or segment == ".":
            continue
        if segment == "..":
            skip += 1
        elif skip > 0:
            skip -= 1
        else:
            kept.append(segment)
    kept.reverse()
    return kept, skip


def make_relative(path: str, folder: str, platform: Platform | None = None) -> str:
    """Return ``path`` relative to ``folder``.

    If ``path`` is not under ``folder`` it is returned unmodified. Safe for
    remote paths: no disk access.

    Examples:
        make_relative("/src/project/foo.cpp", "/src") -> "project/foo.cpp"
        make_relative("/src/project/foo.cpp", "/specs") -> "/src/project/foo.cpp"
        make_relative("/src/project/foo.cpp", "/src/proj") -> "/src/project/foo.cpp"

    Args:
        path: Path to make relative.
        folder: Folder to make it relative to.
        platform: Path conventions to apply. Defaults to the host.

    Returns:
        The relative path, ``""`` if both are equal, or ``path`` unchanged.

    Raises:
        InvalidArgumentError: If ``path`` is empty.
    """
    platform = platform or Platform.current()
    if not path:
        raise InvalidArgumentError("path must not be empty")

    sep = platform.sep
    path = path.replace(platform.alt_sep, sep)
    folder = folder.replace(platform.alt_sep, sep)

    if not platform.starts_with(path, folder):
        return path

    if len(path) == len(folder):
        return ""

    # A folder like "C:\" or "usr/bin/" already ends on a boundary.
    if folder and folder[-1] == sep:
        return path[len(folder) :]
    if path[len(folder)] == sep:
        return path[len(folder) + 1 :]
    return path


def parent_directory_name(path: str, platform: Platform | None = None) -> str:
    """Return the parent directory of ``path``, textually.

    Trailing separators are ignored, so ``/a/b/`` has parent ``/a``. On
    POSIX a rooted input keeps its leading ``/``; the parent of ``/`` is
    ``/``.

    Args:
        path: Path whose parent to compute.
        platform: Path conventions to apply. Defaults to the host.

    Returns:
        The parent path, or ``""`` for blank input or a single relative
        component.
    """
    platform = platform or Platform.current()
    if not path or not path.strip():
        return ""

    if platform.is_windows:
        normalized = path.rstrip("\\/").replace("/", "\\")
        parts = [p for p in normalized.split("\\") if p]
        return "\\".join(parts[:-1])

    parts = [p for p in path.rstrip("/").split("/") if p]
    prefix = "/" if path.startswith("/") else ""
    return prefix + "/".join(parts[:-1])


# =============================================================================
# Application directories
# =============================================================================


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/treewright/ (or XDG_CONFIG_HOME/treewright/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    Holds the default staging area for staged moves.

    Returns:
        Path to ~/.local/state/treewright/ (or XDG_STATE_HOME/treewright/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/treewright/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_staging_dir() -> Path:
    """Get the default staging directory used by staged moves.

    Returns:
        Path to ~/.local/state/treewright/staging.
    """
    return get_state_dir() / "staging"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_state_dir(), "state")
