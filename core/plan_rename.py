"""
plan_rename.py - Rename Plan Generation Module

Responsibilities:
- Generate target names from captured variables (pattern rename)
- Generate prefixed names (prefix rename)
- Collision detection (reported as warnings, nothing is merged)
- Output RenamePlan

Plan building never renames, copies or creates anything.
"""

from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from .models_fs import CaptureSet, RenamePlan, RenameOptions
from .pattern_compile import CompileError
from .scan_files import get_existing_names
from .text_match import output_variables, stays_in_directory, substitute_variables

logger = logging.getLogger(__name__)


def _check_collisions(plan: RenamePlan, sources: Iterable[str]) -> None:
    """Warn about duplicate targets and targets already on disk"""
    existing = get_existing_names(plan.directory)
    sources = set(sources)

    by_target: Dict[str, List[str]] = defaultdict(list)
    for c in plan.changed_candidates:
        by_target[c.new_name].append(c.original_name)

    for target, originals in by_target.items():
        if len(originals) > 1:
            plan.add_warning(
                f"Multiple files have the same destination {target}: {', '.join(originals)} "
                f"(only the first will be renamed)"
            )
        if target in sources:
            plan.add_warning(f"Target {target} is another matched file, it will be skipped if still present")
        elif target in existing:
            plan.add_warning(f"Target {target} already exists, it will be skipped")


def plan_pattern_rename(
    directory: Path,
    matches: Sequence[Tuple[str, CaptureSet]],
    output_pattern: str,
    variable_names: Sequence[str],
    options: Optional[RenameOptions] = None
) -> RenamePlan:
    """
    Generate pattern rename plan

    Args:
        directory: Directory holding the matched files
        matches: (file name, captures) pairs in discovery order
        output_pattern: Output pattern, empty keeps the original names
        variable_names: Input pattern variables in discovery order
        options: Rename options

    Returns:
        Rename plan

    Raises:
        CompileError: strict_variables is set and the output pattern uses a
            variable the input pattern does not capture
    """
    if options is None:
        options = RenameOptions()

    plan = RenamePlan(directory=Path(directory).resolve(), options=options)

    unknown = [n for n in output_variables(output_pattern) if n not in variable_names]
    if unknown and options.strict_variables:
        raise CompileError(
            f"Output pattern uses variables not in the input pattern: "
            f"{', '.join(f'[{n}]' for n in unknown)}"
        )

    for name, captures in matches:
        if not output_pattern:
            plan.add_candidate(name, name)
            continue

        new_name, unresolved = substitute_variables(output_pattern, captures, variable_names)

        if not stays_in_directory(new_name):
            plan.add_warning(f"Skip {name}: {new_name!r} is not a valid file name")
            continue

        plan.add_candidate(name, new_name, unresolved)
        if unresolved:
            plan.add_warning(f"{name} -> {new_name}: unresolved {', '.join(unresolved)}")

    _check_collisions(plan, (name for name, _ in matches))

    logger.info("Planned %d of %d matched files (%d changed)",
                len(plan.candidates), len(matches), plan.total_count)
    return plan


def plan_prefix_rename(
    directory: Path,
    names: Sequence[str],
    prefix: str,
    options: Optional[RenameOptions] = None
) -> RenamePlan:
    """
    Generate prefix rename plan

    Names already starting with the prefix are left out.

    Args:
        directory: Directory holding the files
        names: File names in discovery order
        prefix: Prefix to prepend
        options: Rename options

    Returns:
        Rename plan
    """
    if options is None:
        options = RenameOptions()

    plan = RenamePlan(directory=Path(directory).resolve(), options=options)

    if not prefix:
        plan.add_warning("Prefix is empty, nothing to rename")
        return plan

    for name in names:
        if name.startswith(prefix):
            logger.debug("Skip %s: already prefixed", name)
            continue

        new_name = prefix + name
        if not stays_in_directory(new_name):
            plan.add_warning(f"Skip {name}: {new_name!r} is not a valid file name")
            continue

        plan.add_candidate(name, new_name)

    _check_collisions(plan, names)
    return plan


def preview_lines(plan: RenamePlan, limit: Optional[int] = None) -> List[str]:
    """
    Preview lines "{original} -> {new}" in plan order

    Args:
        plan: Rename plan
        limit: Maximum number of lines (default: plan.options.preview_limit)

    Returns:
        Preview lines
    """
    if limit is None:
        limit = plan.options.preview_limit
    return [f"{c.original_name} -> {c.new_name}" for c in plan.candidates[:limit]]
