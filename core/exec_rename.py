"""
exec_rename.py - Rename Execution Module

Responsibilities:
- Backup-first move (best effort, a failed backup never blocks the rename)
- Per-candidate outcomes, one bad file never stops the batch
- Cancellation between candidates

There is no rollback: renames done before a later failure stay in effect.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
import errno
import logging
import os
import shutil

from .models_fs import (
    ExecutionResult, ExecutionStatus, RenameCandidate, RenamePlan, RenameResult
)
from .safety_checks import check_source, target_exists

logger = logging.getLogger(__name__)


def backup_dir_name(timestamp: datetime, prefix: str = "_backup_") -> str:
    """Backup directory name, e.g. _backup_20240131_235959"""
    return f"{prefix}{timestamp.strftime('%Y%m%d_%H%M%S')}"


def create_backup_dir(directory: Path, timestamp: Optional[datetime] = None,
                      prefix: str = "_backup_") -> Path:
    """
    Create the backup directory of one run

    A taken name gets a numeric suffix, a backup directory is never reused.

    Args:
        directory: Target directory
        timestamp: Run timestamp (default: now)
        prefix: Directory name prefix

    Returns:
        Created directory
    """
    if timestamp is None:
        timestamp = datetime.now()
    base = backup_dir_name(timestamp, prefix)
    path = Path(directory) / base
    n = 1
    while True:
        try:
            path.mkdir()
            return path
        except FileExistsError:
            path = Path(directory) / f"{base}_{n}"
            n += 1


def _move_no_overwrite(src: Path, dst: Path) -> None:
    """
    Move src to dst, never replacing an existing dst

    Raises:
        FileExistsError: dst appeared after the existence check
        OSError: Any other failure
    """
    if not src.is_symlink():
        try:
            os.link(src, dst)
        except FileExistsError:
            raise
        except OSError as e:
            logger.debug("Hard link unavailable for %s (%s), using rename", src, e)
        else:
            try:
                os.unlink(src)
            except OSError:
                os.unlink(dst)
                raise
            return

    if target_exists(dst):
        raise FileExistsError(errno.EEXIST, "Target already exists", str(dst))
    os.rename(src, dst)


def execute_rename(
    plan: RenamePlan,
    create_backup: Optional[bool] = None,
    progress_callback: Optional[Callable[[int, int, str], None]] = None,
    cancel_check: Optional[Callable[[], bool]] = None,
    timestamp: Optional[datetime] = None
) -> RenameResult:
    """
    Execute a confirmed rename plan in plan order

    Args:
        plan: Rename plan (not modified)
        create_backup: Copy originals before moving (default: plan.options.create_backup)
        progress_callback: Progress callback (current, total, message)
        cancel_check: Returns True to stop before the next candidate
        timestamp: Run timestamp used for the backup directory name

    Returns:
        Execution result
    """
    if create_backup is None:
        create_backup = plan.options.create_backup

    result = RenameResult()
    candidates = plan.candidates
    total = len(candidates)

    if total == 0:
        return result

    def record(candidate: RenameCandidate, status: ExecutionStatus, reason: str = "") -> None:
        result.records.append(ExecutionResult(candidate, status, reason))

    backup_error = ""
    if create_backup and plan.changed_candidates:
        try:
            result.backup_dir = create_backup_dir(plan.directory, timestamp, plan.options.backup_prefix)
            logger.info("Backup directory: %s", result.backup_dir)
        except OSError as e:
            backup_error = f"Cannot create backup directory: {e}"
            logger.warning(backup_error)

    for i, candidate in enumerate(candidates):
        if cancel_check is not None and cancel_check():
            result.cancelled = True
            for remaining in candidates[i:]:
                record(remaining, ExecutionStatus.CANCELLED)
            logger.info("Cancelled, %d candidates not processed", total - i)
            break

        if progress_callback:
            progress_callback(i + 1, total, f"{candidate.original_name} -> {candidate.new_name}")

        if target_exists(candidate.new_path):
            logger.debug("Skip %s: target exists", candidate.original_name)
            record(candidate, ExecutionStatus.SKIPPED_TARGET_EXISTS)
            continue

        ok, error = check_source(candidate.original_path)
        if not ok:
            logger.warning("Cannot rename %s: %s", candidate.original_name, error)
            record(candidate, ExecutionStatus.RENAME_FAILED, error)
            continue

        if create_backup:
            if result.backup_dir is None:
                record(candidate, ExecutionStatus.BACKUP_FAILED, backup_error)
            else:
                try:
                    shutil.copy2(candidate.original_path, result.backup_dir / candidate.original_name)
                except OSError as e:
                    logger.warning("Backup of %s failed: %s", candidate.original_name, e)
                    record(candidate, ExecutionStatus.BACKUP_FAILED, str(e))

        try:
            _move_no_overwrite(candidate.original_path, candidate.new_path)
        except FileExistsError:
            logger.debug("Skip %s: target appeared before the move", candidate.original_name)
            record(candidate, ExecutionStatus.SKIPPED_TARGET_EXISTS)
        except OSError as e:
            logger.warning("Rename %s -> %s failed: %s", candidate.original_name, candidate.new_name, e)
            record(candidate, ExecutionStatus.RENAME_FAILED, str(e))
        else:
            logger.debug("Renamed %s -> %s", candidate.original_name, candidate.new_name)
            record(candidate, ExecutionStatus.RENAMED)

    if result.backup_dir is not None and not any(result.backup_dir.iterdir()):
        # Every candidate was skipped before its backup copy
        try:
            result.backup_dir.rmdir()
        except OSError as e:
            logger.debug("Cannot remove empty backup directory %s: %s", result.backup_dir, e)
        else:
            result.backup_dir = None

    logger.info("Renamed %d, skipped %d, failed %d",
                len(result.renamed), len(result.skipped), len(result.failed))
    return result
