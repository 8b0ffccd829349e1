"""Guarded branch deletion."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from lopper.git import GitError, VcsGateway
from lopper.models import DeletionOutcome, DeletionResult, is_protected, is_remote_protected

logger = logging.getLogger(__name__)

ResultCallback = Callable[[DeletionResult], None]


@dataclass(frozen=True)
class DeletionSummary:
    """Counts of each outcome in a deletion run."""

    deleted: int = 0
    skipped: int = 0
    failed: int = 0

    @classmethod
    def of(cls, results: Sequence[DeletionResult]) -> "DeletionSummary":
        return cls(
            deleted=sum(1 for result in results if result.outcome == DeletionOutcome.DELETED),
            skipped=sum(1 for result in results if result.outcome == DeletionOutcome.SKIPPED),
            failed=sum(1 for result in results if result.outcome == DeletionOutcome.FAILED),
        )

    @property
    def total(self) -> int:
        return self.deleted + self.skipped + self.failed


def _run(
    names: Sequence[str],
    protected: Callable[[str], bool],
    delete: Callable[[str], None],
    on_result: Optional[ResultCallback],
) -> list[DeletionResult]:
    results = []
    for name in names:
        # Checked again here: the names may come from an older listing
        if protected(name):
            logger.debug("Skipping protected branch %s", name)
            result = DeletionResult.protected(name)
        else:
            try:
                delete(name)
            except GitError as err:
                logger.warning("Failed to delete %s: %s", name, err)
                result = DeletionResult.failed(name, err)
            else:
                logger.debug("Deleted %s", name)
                result = DeletionResult.deleted(name)
        results.append(result)
        if on_result is not None:
            on_result(result)
    return results


def execute_deletion(
    gateway: VcsGateway,
    names: Sequence[str],
    force: bool = False,
    on_result: Optional[ResultCallback] = None,
) -> list[DeletionResult]:
    """Delete local branches one at a time, in order.

    Protected names are skipped without touching the gateway. A failed
    deletion is recorded and the remaining branches are still attempted, so
    the result always has one entry per input name, in input order.

    Args:
        gateway: Gateway used to delete each branch
        names: Branch names to delete
        force: Delete branches with unmerged commits
        on_result: Called with each result as soon as it is known
    """
    return _run(names, is_protected, lambda name: gateway.delete_local(name, force=force), on_result)


def execute_remote_deletion(
    gateway: VcsGateway,
    names: Sequence[str],
    on_result: Optional[ResultCallback] = None,
) -> list[DeletionResult]:
    """Delete remote-qualified branches (``origin/feature``) on their remotes.

    Same guarantees as :func:`execute_deletion`, using remote protection.
    """
    return _run(names, is_remote_protected, gateway.delete_remote, on_result)
