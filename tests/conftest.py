"""Shared fixtures."""

from pathlib import Path

import pytest

from core import RenameOptions, compile_pattern, match_files, plan_pattern_rename, scan_directory


@pytest.fixture
def make_files(tmp_path):
    """Create files in tmp_path, each containing its own name."""

    def _make(*names: str) -> Path:
        for name in names:
            (tmp_path / name).write_text(name)
        return tmp_path

    return _make


@pytest.fixture
def build_plan(tmp_path):
    """Scan tmp_path and build a pattern plan."""

    def _build(input_pattern: str, output_pattern: str, **options):
        compiled = compile_pattern(input_pattern)
        names = scan_directory(tmp_path, glob=compiled.glob)
        matches = match_files(compiled, names)
        return plan_pattern_rename(
            tmp_path, matches, output_pattern, compiled.variable_names, RenameOptions(**options)
        )

    return _build
