"""
core - Pattern Rename Core Module

Provides pattern compilation, matching, rename plan generation and execution
"""

from .models_fs import (
    CaptureSet,
    Literal,
    Variable,
    Wildcard,
    PatternToken,
    CompiledPattern,
    RenameCandidate,
    RenamePlan,
    RenameOptions,
    ExecutionStatus,
    ExecutionResult,
    RenameResult,
)

from .pattern_compile import (
    CompileError,
    compile_pattern,
    derive_glob,
)

from .scan_files import (
    scan_directory,
    scan_for_pattern,
    targets_hidden,
    get_existing_names,
)

from .text_match import (
    match_name,
    match_files,
    glob_filter,
    output_variables,
    substitute_variables,
    stays_in_directory,
)

from .plan_rename import (
    plan_pattern_rename,
    plan_prefix_rename,
    preview_lines,
)

from .exec_rename import (
    execute_rename,
    create_backup_dir,
    backup_dir_name,
)

from .safety_checks import (
    check_source,
    target_exists,
)

__all__ = [
    # Data models
    "CaptureSet",
    "Literal",
    "Variable",
    "Wildcard",
    "PatternToken",
    "CompiledPattern",
    "RenameCandidate",
    "RenamePlan",
    "RenameOptions",
    "ExecutionStatus",
    "ExecutionResult",
    "RenameResult",

    # Compilation
    "CompileError",
    "compile_pattern",
    "derive_glob",

    # Scanning
    "scan_directory",
    "scan_for_pattern",
    "targets_hidden",
    "get_existing_names",

    # Matching
    "match_name",
    "match_files",
    "glob_filter",
    "output_variables",
    "substitute_variables",
    "stays_in_directory",

    # Planning
    "plan_pattern_rename",
    "plan_prefix_rename",
    "preview_lines",

    # Execution
    "execute_rename",
    "create_backup_dir",
    "backup_dir_name",

    # Safety checks
    "check_source",
    "target_exists",
]
