"""Locating a module's cabal descriptor on disk."""

from pathlib import Path

from src.core.logger.logger import get_logger

logger = get_logger(__name__)

DESCRIPTOR_EXTENSION = ".cabal"

# Sources compiled by the build; used to filter build inputs.
COMPILABLE_FILE_EXTENSIONS = ("hs", "lhs")

FILE_URL_PREFIX = "file://"


def content_root_path(root: str | Path) -> Path:
    """Turn a content root (plain path or ``file://`` URL) into a path."""
    root = str(root)
    if root.startswith(FILE_URL_PREFIX):
        root = root[len(FILE_URL_PREFIX):]
    return Path(root)


def find_descriptor(content_root: str | Path) -> Path | None:
    """Find the ``.cabal`` file directly inside a module's content root.

    Args:
        content_root: Module content root path or ``file://`` URL.

    Returns:
        The first descriptor file in name order, or None if there is none.
    """
    root = content_root_path(content_root)
    if not root.is_dir():
        logger.debug(f"Content root is not a directory: {root}")
        return None

    candidates = sorted(
        p for p in root.iterdir() if p.is_file() and p.name.endswith(DESCRIPTOR_EXTENSION)
    )
    if len(candidates) > 1:
        logger.warning(
            f"Several descriptor files in {root}, using {candidates[0].name}: "
            f"{', '.join(p.name for p in candidates)}"
        )
    return candidates[0] if candidates else None


def is_compilable(path: str | Path) -> bool:
    """Check whether a file is a Haskell source the build compiles."""
    return Path(path).suffix.lstrip(".") in COMPILABLE_FILE_EXTENSIONS
