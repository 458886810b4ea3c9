"""Unit tests for rename execution."""

from datetime import datetime
import errno
import os
import sys

import pytest

from core import ExecutionResult, ExecutionStatus, backup_dir_name, execute_rename
from core import exec_rename

RUN_TIME = datetime(2024, 1, 31, 23, 59, 59)


def statuses(result, plan):
    return [result.status_of(c) for c in plan.candidates]


class TestExecuteRename:
    """Tests for execute_rename without backups."""

    def test_renames_in_plan_order(self, make_files, build_plan, tmp_path):
        """Test a plain successful run."""
        make_files("IMG_8557.png", "IMG_8558.png", "readme.md")
        plan = build_plan("[Prefix]_[NR].png", "Result_[NR].png")

        result = execute_rename(plan, create_backup=False)

        assert result.lines() == [
            "Renamed: IMG_8557.png -> Result_8557.png",
            "Renamed: IMG_8558.png -> Result_8558.png",
        ]
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "Result_8557.png", "Result_8558.png", "readme.md",
        ]
        assert (tmp_path / "Result_8557.png").read_text() == "IMG_8557.png"

    def test_existing_target_is_skipped(self, make_files, build_plan, tmp_path):
        """Test a candidate whose target exists is skipped and the rest still run."""
        make_files("one.txt", "two.txt", "one.md")
        plan = build_plan("[N].txt", "[N].md")

        result = execute_rename(plan, create_backup=False)

        assert statuses(result, plan) == [
            ExecutionStatus.SKIPPED_TARGET_EXISTS,
            ExecutionStatus.RENAMED,
        ]
        assert (tmp_path / "one.txt").exists()
        assert (tmp_path / "one.md").read_text() == "one.md"
        assert (tmp_path / "two.md").read_text() == "two.txt"

    def test_collision_renames_only_first(self, make_files, build_plan, tmp_path):
        """Test two candidates with the same target."""
        make_files("a_1.txt", "b_1.txt")
        plan = build_plan("[X]_[N].txt", "[N].txt")

        result = execute_rename(plan, create_backup=False)

        assert statuses(result, plan) == [
            ExecutionStatus.RENAMED,
            ExecutionStatus.SKIPPED_TARGET_EXISTS,
        ]
        assert (tmp_path / "1.txt").read_text() == "a_1.txt"
        assert (tmp_path / "b_1.txt").exists()

    def test_noop_candidates_are_skipped(self, make_files, build_plan):
        """Test unchanged names reach the executor and are not moved."""
        make_files("a.txt")
        plan = build_plan("[N].txt", "")

        result = execute_rename(plan, create_backup=False)

        assert statuses(result, plan) == [ExecutionStatus.SKIPPED_TARGET_EXISTS]

    def test_missing_source_fails_alone(self, make_files, build_plan, tmp_path):
        """Test a vanished source is reported and the batch continues."""
        make_files("a.txt", "b.txt")
        plan = build_plan("[N].txt", "[N].md")
        (tmp_path / "a.txt").unlink()

        result = execute_rename(plan, create_backup=False)

        assert statuses(result, plan) == [
            ExecutionStatus.RENAME_FAILED,
            ExecutionStatus.RENAMED,
        ]
        assert result.failed[0].reason == "Source file does not exist"
        assert result.lines()[0] == "Failed: a.txt -> a.md: Source file does not exist"

    def test_rename_failure_is_isolated(self, make_files, build_plan, tmp_path, monkeypatch):
        """Test an OSError on one move does not stop the others."""
        make_files("a.txt", "b.txt", "c.txt")
        plan = build_plan("[N].txt", "[N].md")
        real_move = exec_rename._move_no_overwrite

        def flaky_move(src, dst):
            if src.name == "b.txt":
                raise PermissionError("file in use")
            real_move(src, dst)

        monkeypatch.setattr(exec_rename, "_move_no_overwrite", flaky_move)

        result = execute_rename(plan, create_backup=False)

        assert statuses(result, plan) == [
            ExecutionStatus.RENAMED,
            ExecutionStatus.RENAME_FAILED,
            ExecutionStatus.RENAMED,
        ]
        assert result.failed[0].reason == "file in use"
        assert (tmp_path / "b.txt").exists()
        assert (tmp_path / "c.md").exists()

    def test_move_never_overwrites(self, make_files, build_plan, tmp_path, monkeypatch):
        """Test a target appearing after the existence check is not replaced."""
        make_files("a.txt")
        plan = build_plan("[N].txt", "[N].md")
        (tmp_path / "a.md").write_text("late")
        monkeypatch.setattr(exec_rename, "target_exists", lambda path: False)

        result = execute_rename(plan, create_backup=False)

        assert statuses(result, plan) == [ExecutionStatus.SKIPPED_TARGET_EXISTS]
        assert (tmp_path / "a.md").read_text() == "late"
        assert (tmp_path / "a.txt").exists()

    def test_rename_fallback_without_hard_links(self, make_files, build_plan, tmp_path, monkeypatch):
        """Test the move still works where hard links are not supported."""
        make_files("a.txt")
        plan = build_plan("[N].txt", "[N].md")

        def no_link(src, dst):
            raise OSError(errno.EPERM, "Operation not permitted")

        monkeypatch.setattr(exec_rename.os, "link", no_link)

        result = execute_rename(plan, create_backup=False)

        assert statuses(result, plan) == [ExecutionStatus.RENAMED]
        assert (tmp_path / "a.md").read_text() == "a.txt"
        assert not (tmp_path / "a.txt").exists()

    def test_rename_fallback_never_overwrites(self, make_files, build_plan, tmp_path, monkeypatch):
        """Test the rename fallback re-checks a target that appeared late."""
        make_files("a.txt")
        plan = build_plan("[N].txt", "[N].md")
        (tmp_path / "a.md").write_text("late")
        calls = []

        def exists_after_first_check(path):
            calls.append(path)
            return len(calls) > 1 and os.path.lexists(path)

        def no_link(src, dst):
            raise OSError(errno.EPERM, "Operation not permitted")

        monkeypatch.setattr(exec_rename, "target_exists", exists_after_first_check)
        monkeypatch.setattr(exec_rename.os, "link", no_link)

        result = execute_rename(plan, create_backup=False)

        assert statuses(result, plan) == [ExecutionStatus.SKIPPED_TARGET_EXISTS]
        assert len(calls) == 2
        assert (tmp_path / "a.md").read_text() == "late"
        assert (tmp_path / "a.txt").exists()

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlink_source_is_moved_as_link(self, make_files, build_plan, tmp_path):
        """Test a symlink is renamed itself and its target's content is backed up."""
        make_files("real.dat")
        (tmp_path / "ln.txt").symlink_to(tmp_path / "real.dat")
        plan = build_plan("[N].txt", "[N].md")

        result = execute_rename(plan, create_backup=True, timestamp=RUN_TIME)

        assert statuses(result, plan) == [ExecutionStatus.RENAMED]
        assert (tmp_path / "ln.md").is_symlink()
        assert not (tmp_path / "ln.txt").is_symlink()
        assert (tmp_path / "ln.md").read_text() == "real.dat"
        assert (result.backup_dir / "ln.txt").read_text() == "real.dat"

    def test_plan_is_not_modified(self, make_files, build_plan):
        """Test the executor only reads the plan."""
        make_files("a.txt", "b.txt")
        plan = build_plan("[N].txt", "[N].md")
        before = list(plan.candidates)

        execute_rename(plan, create_backup=False)

        assert plan.candidates == before

    def test_empty_plan(self, build_plan, tmp_path):
        """Test nothing happens for an empty plan."""
        plan = build_plan("[N].txt", "[N].md")

        result = execute_rename(plan, create_backup=True, timestamp=RUN_TIME)

        assert result.records == []
        assert result.backup_dir is None
        assert list(tmp_path.iterdir()) == []

    def test_progress_callback(self, make_files, build_plan):
        """Test progress is reported per candidate."""
        make_files("a.txt", "b.txt")
        plan = build_plan("[N].txt", "[N].md")
        calls = []

        execute_rename(plan, create_backup=False,
                       progress_callback=lambda cur, total, msg: calls.append((cur, total, msg)))

        assert calls == [(1, 2, "a.txt -> a.md"), (2, 2, "b.txt -> b.md")]

    def test_cancel_stops_before_next_candidate(self, make_files, build_plan, tmp_path):
        """Test cancellation leaves remaining candidates untouched."""
        make_files("a.txt", "b.txt", "c.txt")
        plan = build_plan("[N].txt", "[N].md")
        checks = []

        def cancel_after_first():
            checks.append(True)
            return len(checks) > 1

        result = execute_rename(plan, create_backup=False, cancel_check=cancel_after_first)

        assert result.cancelled
        assert statuses(result, plan) == [
            ExecutionStatus.RENAMED,
            ExecutionStatus.CANCELLED,
            ExecutionStatus.CANCELLED,
        ]
        assert (tmp_path / "b.txt").exists()
        assert (tmp_path / "c.txt").exists()

    def test_summary(self, make_files, build_plan):
        """Test the summary counts."""
        make_files("one.txt", "two.txt", "one.md")
        plan = build_plan("[N].txt", "[N].md")

        summary = execute_rename(plan, create_backup=False).summary()

        assert "Renamed: 1" in summary
        assert "Skipped (target exists): 1" in summary
        assert "Failed: 0" in summary


class TestBackup:
    """Tests for the backup-first move."""

    def test_backup_dir_name(self):
        assert backup_dir_name(RUN_TIME) == "_backup_20240131_235959"

    def test_copies_originals_before_rename(self, make_files, build_plan, tmp_path):
        """Test originals are copied into the run's backup directory."""
        make_files("IMG_1.png", "IMG_2.png")
        plan = build_plan("[Prefix]_[NR].png", "Result_[NR].png")

        result = execute_rename(plan, create_backup=True, timestamp=RUN_TIME)

        backup = tmp_path.resolve() / "_backup_20240131_235959"
        assert result.backup_dir == backup
        assert sorted(p.name for p in backup.iterdir()) == ["IMG_1.png", "IMG_2.png"]
        assert (backup / "IMG_1.png").read_text() == "IMG_1.png"
        assert len(result.renamed) == 2

    def test_backup_defaults_to_plan_options(self, make_files, build_plan, tmp_path):
        """Test the plan's options decide when no override is given."""
        make_files("a.txt")
        plan = build_plan("[N].txt", "[N].md", create_backup=False)

        result = execute_rename(plan, timestamp=RUN_TIME)

        assert result.backup_dir is None
        assert not (tmp_path / "_backup_20240131_235959").exists()

    def test_backup_dir_is_never_reused(self, make_files, build_plan, tmp_path):
        """Test a taken backup directory name gets a suffix."""
        make_files("a.txt")
        (tmp_path / "_backup_20240131_235959").mkdir()
        plan = build_plan("[N].txt", "[N].md")

        result = execute_rename(plan, create_backup=True, timestamp=RUN_TIME)

        assert result.backup_dir.name == "_backup_20240131_235959_1"
        assert list((tmp_path / "_backup_20240131_235959").iterdir()) == []

    def test_backup_failure_is_not_fatal(self, make_files, build_plan, tmp_path, monkeypatch):
        """Test a failed copy is recorded and the rename still happens."""
        make_files("a.txt")
        plan = build_plan("[N].txt", "[N].md")

        def broken_copy(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(exec_rename.shutil, "copy2", broken_copy)

        result = execute_rename(plan, create_backup=True, timestamp=RUN_TIME)

        assert [r.status for r in result.records] == [
            ExecutionStatus.BACKUP_FAILED,
            ExecutionStatus.RENAMED,
        ]
        assert result.lines()[0] == "Backup failed: a.txt: disk full"
        assert (tmp_path / "a.md").exists()

    def test_backup_dir_creation_failure(self, make_files, build_plan, tmp_path, monkeypatch):
        """Test every backup fails when the directory cannot be created."""
        make_files("a.txt", "b.txt")
        plan = build_plan("[N].txt", "[N].md")

        def no_dir(*args, **kwargs):
            raise PermissionError("read-only")

        monkeypatch.setattr(exec_rename, "create_backup_dir", no_dir)

        result = execute_rename(plan, create_backup=True, timestamp=RUN_TIME)

        assert result.backup_dir is None
        assert len(result.backup_failures) == 2
        assert all("read-only" in r.reason for r in result.backup_failures)
        assert len(result.renamed) == 2

    def test_skipped_candidates_are_not_backed_up(self, make_files, build_plan, tmp_path):
        """Test only files that are about to move get copied."""
        make_files("one.txt", "two.txt", "one.md")
        plan = build_plan("[N].txt", "[N].md")

        result = execute_rename(plan, create_backup=True, timestamp=RUN_TIME)

        assert [p.name for p in result.backup_dir.iterdir()] == ["two.txt"]

    def test_unused_backup_dir_is_removed(self, make_files, build_plan, tmp_path):
        """Test no empty backup directory is left when every candidate is skipped."""
        make_files("one.txt", "one.md")
        plan = build_plan("[N].txt", "[N].md")

        result = execute_rename(plan, create_backup=True, timestamp=RUN_TIME)

        assert statuses(result, plan) == [ExecutionStatus.SKIPPED_TARGET_EXISTS]
        assert result.backup_dir is None
        assert "Backup directory" not in result.summary()
        assert sorted(p.name for p in tmp_path.iterdir()) == ["one.md", "one.txt"]


@pytest.mark.parametrize("status, line", [
    (ExecutionStatus.RENAMED, "Renamed: a.txt -> a.md"),
    (ExecutionStatus.SKIPPED_TARGET_EXISTS, "Skipped (target exists): a.txt -> a.md"),
    (ExecutionStatus.CANCELLED, "Cancelled: a.txt -> a.md"),
])
def test_status_lines(status, line, make_files, build_plan):
    """Test the status line formats."""
    make_files("a.txt")
    candidate = build_plan("[N].txt", "[N].md").candidates[0]

    assert ExecutionResult(candidate, status).describe() == line
