"""
cli_entry.py - CLI Entry Point

Supports:
- Command-line argument mode
- Interactive mode
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from core import (
    compile_pattern, scan_directory, scan_for_pattern, match_files,
    plan_pattern_rename, plan_prefix_rename,
    CompileError, RenameOptions
)

from .cli_interactive import interactive_mode, run_plan


LOG_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Console logging, DEBUG with --verbose"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def non_negative_int(value: str) -> int:
    """argparse type for counts that cannot be negative"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = argparse.ArgumentParser(
        prog="pattern-rename",
        description="Rename files with [Variable] patterns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  pattern-rename

  # Show which files match and what they capture
  pattern-rename match ./photos --input "[Prefix]_[NR].png"

  # Pattern rename
  pattern-rename pattern ./photos --input "[Prefix]_[NR].png" --output "Result_[NR].png"

  # Prefix rename
  pattern-rename prefix ./photos --prefix "ProjectX_"
"""
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--include-hidden", action="store_true", help="Include hidden files")

    subparsers = parser.add_subparsers(dest="command", help="Subcommands")

    # Options shared by the renaming subcommands
    rename_options = argparse.ArgumentParser(add_help=False)
    rename_options.add_argument("--no-backup", action="store_true", help="Do not copy files to a backup directory first")
    rename_options.add_argument("--dry-run", "-d", action="store_true", help="Preview only, do not execute")
    rename_options.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    rename_options.add_argument("--preview-limit", type=non_negative_int, default=10, help="Number of preview lines")

    # match subcommand
    match_parser = subparsers.add_parser("match", help="List matching files and their captures")
    match_parser.add_argument("directory", type=str, help="Target directory")
    match_parser.add_argument("--input", "-i", type=str, required=True, help="Input pattern")

    # pattern subcommand
    pattern_parser = subparsers.add_parser("pattern", parents=[rename_options], help="Pattern rename")
    pattern_parser.add_argument("directory", type=str, help="Target directory")
    pattern_parser.add_argument("--input", "-i", type=str, required=True, help="Input pattern")
    pattern_parser.add_argument("--output", "-o", type=str, default="", help="Output pattern (empty keeps names)")
    pattern_parser.add_argument("--strict", action="store_true",
                                help="Fail when the output pattern uses variables the input does not capture")

    # prefix subcommand
    prefix_parser = subparsers.add_parser("prefix", parents=[rename_options], help="Prefix rename")
    prefix_parser.add_argument("directory", type=str, help="Target directory")
    prefix_parser.add_argument("--prefix", "-p", type=str, required=True, help="Prefix to add")

    return parser


def options_from_args(args) -> RenameOptions:
    """Build rename options from parsed arguments"""
    return RenameOptions(
        create_backup=not getattr(args, "no_backup", False),
        require_confirmation=not getattr(args, "yes", False),
        preview_limit=getattr(args, "preview_limit", 10),
        strict_variables=getattr(args, "strict", False),
        include_hidden=args.include_hidden,
    )


def _resolve_directory(directory: str) -> Optional[Path]:
    path = Path(directory).expanduser().resolve()
    if not path.is_dir():
        print(f"Error: Directory does not exist: {path}")
        return None
    return path


def cmd_match(args):
    """Handle match command"""
    directory = _resolve_directory(args.directory)
    if directory is None:
        return 1

    try:
        compiled = compile_pattern(args.input)
    except CompileError as e:
        print(f"Error: {e}")
        return 1

    print(f"Directory: {directory}")
    print(f"Input pattern: {compiled.source} (glob: {compiled.glob})")
    print()

    names = scan_for_pattern(directory, compiled, include_hidden=args.include_hidden)
    matches = match_files(compiled, names)

    if not matches:
        print("No matching files found")
        return 0

    print(f"Found {len(matches)} files:")
    print("-" * 80)
    for name, captures in matches:
        values = ", ".join(f"{k}={v!r}" for k, v in captures.items())
        print(f"  {name:<40} {values}")
    print("-" * 80)

    return 0


def cmd_pattern(args):
    """Handle pattern command"""
    directory = _resolve_directory(args.directory)
    if directory is None:
        return 1

    options = options_from_args(args)
    try:
        compiled = compile_pattern(args.input)
        names = scan_for_pattern(directory, compiled, include_hidden=options.include_hidden)
        matches = match_files(compiled, names)
        plan = plan_pattern_rename(directory, matches, args.output, compiled.variable_names, options)
    except CompileError as e:
        print(f"Error: {e}")
        return 1

    print(f"Directory: {directory}")
    print(f"Found {len(matches)} matching files")

    return run_plan(plan, dry_run=args.dry_run)


def cmd_prefix(args):
    """Handle prefix command"""
    directory = _resolve_directory(args.directory)
    if directory is None:
        return 1

    if not args.prefix:
        print("Error: Prefix cannot be empty")
        return 1

    options = options_from_args(args)
    names = scan_directory(directory, include_hidden=options.include_hidden)
    plan = plan_prefix_rename(directory, names, args.prefix, options)

    print(f"Directory: {directory}")

    return run_plan(plan, dry_run=args.dry_run)


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    if args.command is None:
        # No subcommand, enter interactive mode
        return interactive_mode(options_from_args(args))

    # Handle subcommands
    if args.command == "match":
        return cmd_match(args)
    elif args.command == "pattern":
        return cmd_pattern(args)
    elif args.command == "prefix":
        return cmd_prefix(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
