"""Branch data model."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional

PROTECTED_NAMES = frozenset({"master", "main"})


class UpstreamStatus(Enum):
    """Upstream tracking state of a branch."""

    TRACKING = "tracking"
    GONE = "gone"
    NONE = "none"


@dataclass(frozen=True)
class Branch:
    """A single branch as reported by the gateway."""

    name: str
    is_current: bool = False
    upstream_status: UpstreamStatus = UpstreamStatus.NONE
    last_commit_summary: str = ""
    upstream: str = ""


@dataclass(frozen=True)
class BranchCollection:
    """Branches keyed by name, plus the name of the checked out branch.

    ``current_name`` is empty for a detached HEAD, an empty repository and
    remote-tracking listings. In that case no entry may be current.
    """

    entries: dict[str, Branch] = field(default_factory=dict)
    current_name: str = ""

    def __post_init__(self) -> None:
        for name, branch in self.entries.items():
            if name != branch.name:
                raise ValueError(f"Entry key {name!r} does not match branch name {branch.name!r}")
        current = [branch.name for branch in self.entries.values() if branch.is_current]
        if self.current_name:
            if current != [self.current_name]:
                raise ValueError(f"Expected {self.current_name!r} to be the only current branch, found {current}")
        elif current:
            raise ValueError(f"Branches marked current without a current name: {current}")

    @classmethod
    def from_branches(cls, branches: Iterable[Branch]) -> "BranchCollection":
        """Build a collection, deriving the current name from the entries."""
        entries: dict[str, Branch] = {}
        current_name = ""
        for branch in branches:
            if branch.name in entries:
                raise ValueError(f"Duplicate branch name: {branch.name}")
            entries[branch.name] = branch
            if branch.is_current:
                current_name = branch.name
        return cls(entries=entries, current_name=current_name)

    def __iter__(self) -> Iterator[Branch]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def names(self) -> list[str]:
        """Branch names in listing order."""
        return list(self.entries)


def is_protected(name: str) -> bool:
    """Check if a local branch name is protected."""
    return name in PROTECTED_NAMES


def is_remote_protected(name: str) -> bool:
    """Check if a remote-qualified name (``origin/main``) is protected."""
    if "/" not in name:
        return False
    _, branch = name.split("/", 1)
    return branch in PROTECTED_NAMES


class DeletionOutcome(Enum):
    """Outcome of a single deletion attempt."""

    DELETED = "deleted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class DeletionResult:
    """Per-branch result of the deletion workflow."""

    name: str
    outcome: DeletionOutcome
    reason: str = ""
    error: Optional[Exception] = None

    @classmethod
    def deleted(cls, name: str) -> "DeletionResult":
        return cls(name, DeletionOutcome.DELETED)

    @classmethod
    def protected(cls, name: str) -> "DeletionResult":
        return cls(name, DeletionOutcome.SKIPPED, reason="protected")

    @classmethod
    def failed(cls, name: str, error: Exception) -> "DeletionResult":
        return cls(name, DeletionOutcome.FAILED, reason=str(error), error=error)
