"""
text_match.py - Text Matching Tools

Provides pattern matching, glob pre-filtering, output substitution and
file name checks
"""

from fnmatch import fnmatchcase
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Pattern, Tuple
import os
import re

from .models_fs import CaptureSet, CompiledPattern, Literal, Variable, Wildcard

# [name] occurrences in an output pattern
OUTPUT_TOKEN_RE = re.compile(r"\[([^\[\]]+)\]")


@lru_cache(maxsize=32)
def _to_regex(compiled: CompiledPattern) -> Tuple[Pattern[str], Tuple[Tuple[str, int], ...]]:
    """
    Translate tokens into an anchored regex

    Variables become lazy groups so adjacent literals decide the boundaries;
    a repeated variable becomes a backreference to its first group.
    """
    parts: List[str] = []
    groups: Dict[str, int] = {}
    for token in compiled.tokens:
        if isinstance(token, Literal):
            parts.append(re.escape(token.text))
        elif isinstance(token, Wildcard):
            parts.append(".*")
        elif token.name in groups:
            parts.append(f"(?:\\{groups[token.name]})")
        else:
            groups[token.name] = len(groups) + 1
            parts.append("(.+?)")
    regex = re.compile("".join(parts), re.DOTALL)
    return regex, tuple(groups.items())


def match_name(compiled: CompiledPattern, name: str) -> Optional[CaptureSet]:
    """
    Match a file name against a compiled pattern

    Args:
        compiled: Compiled input pattern
        name: File name (with suffix)

    Returns:
        Captured values, or None if the name does not match
    """
    regex, groups = _to_regex(compiled)
    m = regex.fullmatch(name)
    if m is None:
        return None
    return {var: m.group(index) for var, index in groups}


def glob_filter(compiled: CompiledPattern, names: Iterable[str]) -> List[str]:
    """Cheap case-sensitive pre-filter, may keep names the matcher rejects"""
    return [n for n in names if fnmatchcase(n, compiled.glob)]


def match_files(compiled: CompiledPattern, names: Iterable[str]) -> List[Tuple[str, CaptureSet]]:
    """
    Pre-filter and match file names, keeping input order

    Args:
        compiled: Compiled input pattern
        names: Candidate file names

    Returns:
        (name, captures) for every matched name
    """
    matches = []
    for name in glob_filter(compiled, names):
        captures = match_name(compiled, name)
        if captures is not None:
            matches.append((name, captures))
    return matches


def output_variables(output_pattern: str) -> List[str]:
    """Variable names referenced by an output pattern, in order"""
    names: List[str] = []
    for name in OUTPUT_TOKEN_RE.findall(output_pattern):
        if name not in names:
            names.append(name)
    return names


def substitute_variables(
    output_pattern: str,
    captures: CaptureSet,
    variable_names: Iterable[str]
) -> Tuple[str, Tuple[str, ...]]:
    """
    Substitute captured values into an output pattern

    Every [name] occurrence is replaced by plain text replacement, in the
    order of variable_names. Tokens without a capture are left untouched.

    Args:
        output_pattern: Output pattern
        captures: Captured values of one file
        variable_names: Variable names in discovery order

    Returns:
        (new name, unresolved [name] tokens)
    """
    result = output_pattern
    for name in variable_names:
        if name in captures:
            result = result.replace(f"[{name}]", captures[name])

    unresolved = tuple(
        f"[{name}]" for name in output_variables(output_pattern)
        if name not in captures
    )
    return result, unresolved


def stays_in_directory(name: str) -> bool:
    """Whether name is a plain entry of its directory (no separators, not . or ..)"""
    if not name or name in (".", ".."):
        return False
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    return not any(sep in name for sep in separators)

