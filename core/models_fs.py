"""
models_fs.py - Core Data Structure Definitions

Contains:
- Literal / Variable / Wildcard: pattern tokens
- CompiledPattern: compiled input pattern
- RenameCandidate: single rename operation
- RenamePlan: batch rename plan
- RenameOptions: rename options configuration
- ExecutionStatus / ExecutionResult: per-candidate execution records
- RenameResult: execution result of a whole plan
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
from enum import Enum


# Variable name -> captured value
CaptureSet = Dict[str, str]


@dataclass(frozen=True)
class Literal:
    """Text that must match exactly"""
    text: str


@dataclass(frozen=True)
class Variable:
    """Bracketed placeholder, e.g. [NR]"""
    name: str


@dataclass(frozen=True)
class Wildcard:
    """Explicit * outside brackets"""


PatternToken = Union[Literal, Variable, Wildcard]


@dataclass(frozen=True)
class CompiledPattern:
    """Input pattern compiled once per run"""
    source: str                                  # Pattern as typed by the user
    tokens: Tuple[PatternToken, ...]             # Ordered tokens
    glob: str                                    # Pre-filter glob (over-approximation)

    @property
    def variable_names(self) -> List[str]:
        """Distinct variable names in order of first appearance"""
        names: List[str] = []
        for token in self.tokens:
            if isinstance(token, Variable) and token.name not in names:
                names.append(token.name)
        return names


class ExecutionStatus(Enum):
    """Per-candidate execution outcome"""
    RENAMED = "renamed"
    SKIPPED_TARGET_EXISTS = "skipped_target_exists"
    BACKUP_FAILED = "backup_failed"      # Non-fatal, the rename still proceeds
    RENAME_FAILED = "rename_failed"
    CANCELLED = "cancelled"              # Not attempted after a cancellation request


@dataclass(frozen=True)
class RenameCandidate:
    """Single rename operation"""
    original_name: str
    original_path: Path
    new_name: str
    new_path: Path
    unresolved: Tuple[str, ...] = ()     # [name] tokens left in new_name

    @property
    def is_same(self) -> bool:
        """Whether source and destination are the same"""
        return self.original_name == self.new_name

    @property
    def has_unresolved(self) -> bool:
        return bool(self.unresolved)


@dataclass
class RenameOptions:
    """Rename options configuration"""
    create_backup: bool = True           # Copy each file to the run's backup directory first
    require_confirmation: bool = True    # Ask before executing
    preview_limit: int = 10              # Number of preview lines shown before confirmation
    strict_variables: bool = False       # Output variables without a capture are an error
    include_hidden: bool = False         # Whether to include hidden files when scanning
    backup_prefix: str = "_backup_"      # Backup directory name prefix

    def __post_init__(self) -> None:
        if self.preview_limit < 0:
            raise ValueError(f"preview_limit cannot be negative: {self.preview_limit}")


@dataclass
class RenamePlan:
    """Batch rename plan"""
    directory: Path
    candidates: List[RenameCandidate] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    options: RenameOptions = field(default_factory=RenameOptions)

    @property
    def changed_candidates(self) -> List[RenameCandidate]:
        """Get candidates that actually change a name (excluding no-ops)"""
        return [c for c in self.candidates if not c.is_same]

    @property
    def unresolved_count(self) -> int:
        return sum(1 for c in self.candidates if c.has_unresolved)

    @property
    def total_count(self) -> int:
        """Number of candidates that change a name"""
        return len(self.changed_candidates)

    def add_candidate(self, original_name: str, new_name: str,
                      unresolved: Tuple[str, ...] = ()) -> RenameCandidate:
        """Add candidate, both paths anchored at the plan directory"""
        candidate = RenameCandidate(
            original_name=original_name,
            original_path=self.directory / original_name,
            new_name=new_name,
            new_path=self.directory / new_name,
            unresolved=unresolved,
        )
        self.candidates.append(candidate)
        return candidate

    def add_warning(self, msg: str) -> None:
        """Add warning"""
        self.warnings.append(msg)


@dataclass(frozen=True)
class ExecutionResult:
    """Execution record for one candidate"""
    candidate: RenameCandidate
    status: ExecutionStatus
    reason: str = ""

    def describe(self) -> str:
        """Human-readable status line"""
        c = self.candidate
        if self.status is ExecutionStatus.RENAMED:
            return f"Renamed: {c.original_name} -> {c.new_name}"
        if self.status is ExecutionStatus.SKIPPED_TARGET_EXISTS:
            return f"Skipped (target exists): {c.original_name} -> {c.new_name}"
        if self.status is ExecutionStatus.BACKUP_FAILED:
            return f"Backup failed: {c.original_name}: {self.reason}"
        if self.status is ExecutionStatus.CANCELLED:
            return f"Cancelled: {c.original_name} -> {c.new_name}"
        return f"Failed: {c.original_name} -> {c.new_name}: {self.reason}"


@dataclass
class RenameResult:
    """Rename execution result"""
    records: List[ExecutionResult] = field(default_factory=list)
    backup_dir: Optional[Path] = None
    cancelled: bool = False

    def _with_status(self, status: ExecutionStatus) -> List[ExecutionResult]:
        return [r for r in self.records if r.status is status]

    @property
    def renamed(self) -> List[ExecutionResult]:
        return self._with_status(ExecutionStatus.RENAMED)

    @property
    def skipped(self) -> List[ExecutionResult]:
        return self._with_status(ExecutionStatus.SKIPPED_TARGET_EXISTS)

    @property
    def failed(self) -> List[ExecutionResult]:
        return self._with_status(ExecutionStatus.RENAME_FAILED)

    @property
    def backup_failures(self) -> List[ExecutionResult]:
        return self._with_status(ExecutionStatus.BACKUP_FAILED)

    def status_of(self, candidate: RenameCandidate) -> Optional[ExecutionStatus]:
        """Final status of a candidate (a backup failure is never final)"""
        final = None
        for record in self.records:
            if record.candidate is candidate and record.status is not ExecutionStatus.BACKUP_FAILED:
                final = record.status
        return final

    def lines(self) -> List[str]:
        return [r.describe() for r in self.records]

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Execution Result:",
            f"  - Renamed: {len(self.renamed)}",
            f"  - Skipped (target exists): {len(self.skipped)}",
            f"  - Failed: {len(self.failed)}",
            f"  - Backup failures: {len(self.backup_failures)}",
        ]
        if self.backup_dir is not None:
            lines.append(f"  - Backup directory: {self.backup_dir}")
        if self.cancelled:
            lines.append("  - Cancelled before completion")
        if self.failed:
            lines.append("Failure Details:")
            for record in self.failed[:10]:  # Show at most 10
                c = record.candidate
                lines.append(f"  - {c.original_name} -> {c.new_name}: {record.reason}")
            if len(self.failed) > 10:
                lines.append(f"  ... and {len(self.failed) - 10} more failures")
        return "\n".join(lines)
