"""
pattern_compile.py - Pattern Compiler

Turns an input pattern such as "[Prefix]_[NR].png" into an ordered list of
tokens and a glob used to pre-filter directory listings.

Syntax:
- [name]  variable, captures at least one character
- *       wildcard, matches zero or more characters
- anything else is matched literally
"""

from typing import List, Optional

from .models_fs import CompiledPattern, Literal, PatternToken, Variable, Wildcard


class CompileError(ValueError):
    """Invalid pattern syntax"""

    def __init__(self, message: str, pattern: str = "", position: Optional[int] = None):
        self.pattern = pattern
        self.position = position
        if position is not None:
            message = f"{message} (at position {position} in {pattern!r})"
        super().__init__(message)


def compile_pattern(pattern: str) -> CompiledPattern:
    """
    Compile an input pattern

    Args:
        pattern: Pattern string

    Returns:
        Compiled pattern

    Raises:
        CompileError: Empty pattern, empty/nested/unterminated brackets
    """
    if not pattern:
        raise CompileError("Pattern cannot be empty")

    tokens: List[PatternToken] = []
    literal: List[str] = []

    def flush_literal() -> None:
        if literal:
            tokens.append(Literal("".join(literal)))
            literal.clear()

    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                raise CompileError("Unterminated '['", pattern, i)
            name = pattern[i + 1:end]
            if not name:
                raise CompileError("Variable name cannot be empty", pattern, i)
            nested = name.find("[")
            if nested != -1:
                raise CompileError("Nested '[' inside variable", pattern, i + 1 + nested)
            flush_literal()
            tokens.append(Variable(name))
            i = end + 1
            continue
        if char == "*":
            flush_literal()
            tokens.append(Wildcard())
        else:
            literal.append(char)
        i += 1
    flush_literal()

    return CompiledPattern(source=pattern, tokens=tuple(tokens), glob=derive_glob(tokens))


def derive_glob(tokens: List[PatternToken]) -> str:
    """Replace every variable with *, keep literals and wildcards"""
    parts = []
    for token in tokens:
        if isinstance(token, Literal):
            parts.append(token.text)
        else:
            parts.append("*")
    return "".join(parts) or "*"
