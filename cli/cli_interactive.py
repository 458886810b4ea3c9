"""
cli_interactive.py - Interactive CLI

Provides a menu-style interactive interface and the preview/confirm/execute
flow shared with command mode
"""

import sys
from pathlib import Path
from typing import Optional

from core import (
    compile_pattern, scan_directory, scan_for_pattern, match_files,
    plan_pattern_rename, plan_prefix_rename, preview_lines, execute_rename,
    CompileError, CompiledPattern, RenameOptions, RenamePlan
)


def clear_screen():
    """Clear screen"""
    import os
    os.system('cls' if os.name == 'nt' else 'clear')


def print_header(title: str):
    """Print header"""
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print()


def input_directory(prompt: str = "Please enter directory path") -> Optional[Path]:
    """Input and validate directory"""
    while True:
        path_str = input(f"{prompt} (q to return): ").strip()
        if path_str.lower() == 'q':
            return None

        path = Path(path_str).expanduser().resolve()
        if path.is_dir():
            return path
        else:
            print(f"Error: Directory does not exist: {path}")


def input_pattern(prompt: str) -> Optional[CompiledPattern]:
    """Input an input pattern until it compiles"""
    while True:
        text = input(f"{prompt} (q to return): ").strip()
        if text.lower() == 'q':
            return None
        try:
            return compile_pattern(text)
        except CompileError as e:
            print(f"Error: {e}")


def input_bool(prompt: str, default: bool = False) -> bool:
    """Input boolean value"""
    default_str = "Y/n" if default else "y/N"
    value = input(f"{prompt} ({default_str}): ").strip().lower()
    if not value:
        return default
    return value == 'y'


def print_plan(plan: RenamePlan) -> None:
    """Show preview and warnings of a plan"""
    limit = plan.options.preview_limit
    print(f"\nWill perform {plan.total_count} rename operations:")
    print("-" * 70)
    for line in preview_lines(plan, limit):
        print(f"  {line}")
    if len(plan.candidates) > limit:
        print(f"  ... and {len(plan.candidates) - limit} more operations")
    print("-" * 70)

    if plan.warnings:
        print("Warnings:")
        for warn in plan.warnings:
            print(f"  - {warn}")


def run_plan(plan: RenamePlan, dry_run: bool = False) -> int:
    """
    Preview, confirm and execute a plan

    Args:
        plan: Rename plan
        dry_run: Preview only

    Returns:
        Exit code (1 if any rename failed)
    """
    if not plan.candidates:
        print("No matching files found")
        return 0

    if not plan.changed_candidates:
        print("No files need renaming")
        return 0

    print_plan(plan)

    if dry_run:
        print("\n[Preview mode] Will not actually execute")
        return 0

    if plan.options.require_confirmation:
        print()
        if not input_bool("Confirm execution", default=False):
            print("Cancelled")
            return 0

    print("\nExecuting...")
    result = execute_rename(plan)
    for line in result.lines():
        print(line)
    print()
    print(result.summary())

    return 0 if not result.failed else 1


def menu_pattern_rename(options: RenameOptions):
    """Pattern rename menu"""
    print_header("Pattern Rename")
    print("Use [Name] for variables and * for anything, e.g. [Prefix]_[NR].png")
    print()

    directory = input_directory("Please enter target directory")
    if directory is None:
        return

    compiled = input_pattern("Input pattern")
    if compiled is None:
        return

    names = scan_for_pattern(directory, compiled, include_hidden=options.include_hidden)
    matches = match_files(compiled, names)
    if not matches:
        print("No matching files found")
        input("Press Enter to return...")
        return

    print(f"Found {len(matches)} matching files")

    output_pattern = input("Output pattern (leave empty to keep names): ").strip()
    options.create_backup = input_bool("Create backup copies", default=options.create_backup)

    try:
        plan = plan_pattern_rename(directory, matches, output_pattern,
                                   compiled.variable_names, options)
    except CompileError as e:
        print(f"Error: {e}")
        input("Press Enter to return...")
        return

    run_plan(plan)
    input("\nPress Enter to return...")


def menu_prefix_rename(options: RenameOptions):
    """Prefix rename menu"""
    print_header("Prefix Rename")

    directory = input_directory("Please enter target directory")
    if directory is None:
        return

    prefix = input("Prefix: ").strip()
    if not prefix:
        print("Prefix cannot be empty")
        input("Press Enter to return...")
        return

    options.create_backup = input_bool("Create backup copies", default=options.create_backup)

    names = scan_directory(directory, include_hidden=options.include_hidden)
    plan = plan_prefix_rename(directory, names, prefix, options)

    run_plan(plan)
    input("\nPress Enter to return...")


def interactive_mode(options: Optional[RenameOptions] = None) -> int:
    """Interactive mode main loop"""
    if options is None:
        options = RenameOptions()

    while True:
        clear_screen()
        print_header("Pattern Rename Tool")

        print("Please select function:")
        print()
        print("  1. Pattern rename")
        print("  2. Prefix rename")
        print()
        print("  q. Exit")
        print()

        choice = input("Please select (1/2/q): ").strip().lower()

        if choice == 'q':
            print("Goodbye!")
            return 0
        elif choice == '1':
            menu_pattern_rename(options)
        elif choice == '2':
            menu_prefix_rename(options)
        else:
            print("Invalid choice")
            input("Press Enter to continue...")


if __name__ == "__main__":
    sys.exit(interactive_mode())
