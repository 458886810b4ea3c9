"""
safety_checks.py - Safety Check Module

Provides the checks run right before a file is moved
"""

from pathlib import Path
from typing import Optional, Tuple
import os


def target_exists(path: Path) -> bool:
    """Whether anything (file, directory or dangling symlink) occupies path"""
    return os.path.lexists(path)


def check_source(path: Path) -> Tuple[bool, Optional[str]]:
    """
    Check that the source of a move is still a regular file

    Args:
        path: Source path

    Returns:
        (is_valid, error_reason)
    """
    if not path.exists():
        return False, "Source file does not exist"
    if not path.is_file():
        return False, "Source path is not a file"
    return True, None

