"""Branch classification.

Every selector is a pure function of its collection and preserves the order
in which the gateway listed the branches.
"""

from enum import Enum
from typing import Callable

from lopper.models import Branch, BranchCollection, UpstreamStatus, is_protected, is_remote_protected


class DisplayClass(Enum):
    """Presentation class used when listing all branches."""

    CURRENT = "current"
    STALE = "stale"
    NORMAL = "normal"


def _select(collection: BranchCollection, keep: Callable[[Branch], bool]) -> list[Branch]:
    return [branch for branch in collection if keep(branch)]


def _deletable(collection: BranchCollection, protected: Callable[[str], bool]) -> list[Branch]:
    # Both rules apply: a checked out "main" is excluded twice over
    return _select(
        collection,
        lambda branch: branch.name != collection.current_name and not branch.is_current and not protected(branch.name),
    )


def select_deletable(collection: BranchCollection) -> list[Branch]:
    """Branches that may be offered for deletion."""
    return _deletable(collection, is_protected)


def select_merged(collection: BranchCollection) -> list[Branch]:
    """Merged branches that may be deleted, from a merged-branch collection."""
    return _deletable(collection, is_protected)


def select_remote_deletable(collection: BranchCollection) -> list[Branch]:
    """Remote-tracking branches that may be deleted."""
    return _deletable(collection, is_remote_protected)


def is_stale(branch: Branch) -> bool:
    """Whether the branch has an upstream that no longer exists."""
    return branch.upstream_status == UpstreamStatus.GONE


def select_stale(collection: BranchCollection) -> list[Branch]:
    """Branches whose upstream is gone, excluding the current branch.

    Protected names are kept: staleness does not depend on protection.
    """
    return _select(
        collection,
        lambda branch: is_stale(branch) and branch.name != collection.current_name and not branch.is_current,
    )


def display_class(collection: BranchCollection, branch: Branch) -> DisplayClass:
    """Colour class for the all-branches listing."""
    if branch.is_current or branch.name == collection.current_name:
        return DisplayClass.CURRENT
    if is_stale(branch):
        return DisplayClass.STALE
    return DisplayClass.NORMAL


def select_all(collection: BranchCollection) -> list[tuple[Branch, DisplayClass]]:
    """Every branch paired with its presentation class."""
    return [(branch, display_class(collection, branch)) for branch in collection]
