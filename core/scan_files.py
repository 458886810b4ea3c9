"""
scan_files.py - File Scanning Module

Lists candidate files of a single directory (non-recursive)
"""

from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Set

from .models_fs import CompiledPattern, Literal


def scan_directory(
    directory: Path,
    glob: str = "*",
    include_hidden: bool = False
) -> List[str]:
    """
    Scan single directory (non-recursive)

    Args:
        directory: Target directory
        glob: Case-sensitive glob pre-filter
        include_hidden: Whether to include hidden files

    Returns:
        File names sorted by name (stable discovery order)
    """
    directory = Path(directory).resolve()
    if not directory.is_dir():
        raise ValueError(f"Directory does not exist: {directory}")

    names: List[str] = []

    for item in directory.iterdir():
        # Only process files, not directories
        if not item.is_file():
            continue

        # Skip hidden files
        if not include_hidden and item.name.startswith('.'):
            continue

        if not fnmatchcase(item.name, glob):
            continue

        names.append(item.name)

    return sorted(names)


def targets_hidden(compiled: CompiledPattern) -> bool:
    """Whether the pattern can only match dotfiles (leading literal '.')"""
    first = compiled.tokens[0] if compiled.tokens else None
    return isinstance(first, Literal) and first.text.startswith('.')


def scan_for_pattern(
    directory: Path,
    compiled: CompiledPattern,
    include_hidden: bool = False
) -> List[str]:
    """
    Scan directory for names passing the pattern's glob

    Hidden files are included when requested or when the pattern
    itself starts with a dot (e.g. .[Name].txt).
    """
    return scan_directory(
        directory,
        glob=compiled.glob,
        include_hidden=include_hidden or targets_hidden(compiled),
    )


def get_existing_names(directory: Path) -> Set[str]:
    """
    Get set of existing entry names in directory (for conflict detection)

    Args:
        directory: Target directory

    Returns:
        Name set
    """
    directory = Path(directory).resolve()
    if not directory.is_dir():
        return set()

    return {item.name for item in directory.iterdir()}
