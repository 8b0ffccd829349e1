"""In-memory gateway and interaction for testing."""

from contextlib import contextmanager
from typing import Iterable, Iterator, Optional, Sequence

from lopper.git import DeletionError, DeletionFailureReason, FetchError, VcsGateway
from lopper.interaction import Interaction
from lopper.models import Branch, BranchCollection, DeletionResult


class FakeGitRepo(VcsGateway):
    """In-memory fake implementation of the gateway.

    Deletions remove the branch from the fake's state, so a later fetch sees
    the updated repository. Every delete call is recorded in
    ``deleted_local``/``deleted_remote`` (successful) and ``delete_calls``
    (all attempts, in order).
    """

    def __init__(
        self,
        *,
        branches: Iterable[Branch] = (),
        merged: Iterable[str] = (),
        remote_branches: Iterable[Branch] = (),
        delete_raises: Optional[dict[str, Exception]] = None,
        unmerged: Iterable[str] = (),
        fetch_raises: Optional[Exception] = None,
        commit_dates: Optional[dict[str, str]] = None,
    ) -> None:
        """Create a fake with pre-configured state.

        Args:
            branches: Local branches, in listing order
            merged: Names of local branches merged into the current branch
            remote_branches: Remote-tracking branches
            delete_raises: Branch name -> exception raised on delete
            unmerged: Branches that refuse a non-forced local delete
            fetch_raises: Exception raised by every listing call
            commit_dates: Branch name -> last commit date
        """
        self._branches = {branch.name: branch for branch in branches}
        self._merged = set(merged)
        self._remote = {branch.name: branch for branch in remote_branches}
        self._delete_raises = delete_raises or {}
        self._unmerged = set(unmerged)
        self._fetch_raises = fetch_raises
        self._commit_dates = commit_dates or {}
        self.delete_calls: list[tuple[str, bool]] = []
        self.deleted_local: list[str] = []
        self.deleted_remote: list[str] = []

    def _check_fetch(self) -> None:
        if self._fetch_raises is not None:
            raise self._fetch_raises

    def fetch_all_branches(self) -> BranchCollection:
        self._check_fetch()
        return BranchCollection.from_branches(self._branches.values())

    def fetch_merged_branches(self) -> BranchCollection:
        self._check_fetch()
        return BranchCollection.from_branches(
            branch for branch in self._branches.values() if branch.name in self._merged or branch.is_current
        )

    def fetch_remote_branches(self) -> BranchCollection:
        self._check_fetch()
        return BranchCollection.from_branches(self._remote.values())

    def delete_local(self, name: str, *, force: bool) -> None:
        self.delete_calls.append((name, force))
        if name in self._delete_raises:
            raise self._delete_raises[name]
        if name not in self._branches:
            raise DeletionError(name, DeletionFailureReason.NOT_FOUND, f"branch '{name}' not found")
        if not force and name in self._unmerged:
            raise DeletionError(
                name, DeletionFailureReason.NOT_FULLY_MERGED, f"the branch '{name}' is not fully merged"
            )
        del self._branches[name]
        self._merged.discard(name)
        self.deleted_local.append(name)

    def delete_remote(self, name: str) -> None:
        self.delete_calls.append((name, True))
        if name in self._delete_raises:
            raise self._delete_raises[name]
        if name not in self._remote:
            raise DeletionError(name, DeletionFailureReason.NOT_FOUND, f"remote ref does not exist: {name}")
        del self._remote[name]
        self.deleted_remote.append(name)

    def last_commit_date(self, name: str) -> str:
        return self._commit_dates.get(name, "")


def failing_fetch(message: str = "not a git repository") -> FakeGitRepo:
    """Build a fake whose listing calls all fail."""
    return FakeGitRepo(fetch_raises=FetchError(message))


class FakeInteraction(Interaction):
    """Scripted interaction that records what the commands asked for.

    ``selection`` is returned by ``select_many`` (filtered to the offered
    branches, in listing order) and ``confirm_answers`` are consumed one per
    ``confirm`` call, answering no once they run out.
    """

    def __init__(self, *, selection: Iterable[str] = (), confirm_answers: Iterable[bool] = ()) -> None:
        self._selection = list(selection)
        self._confirm_answers = list(confirm_answers)
        self.offered: list[list[str]] = []
        self.questions: list[str] = []
        self.reports: list[list[DeletionResult]] = []

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        yield

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self._confirm_answers.pop(0) if self._confirm_answers else False

    def select_many(self, branches: Sequence[Branch]) -> list[str]:
        names = [branch.name for branch in branches]
        self.offered.append(names)
        return [name for name in names if name in self._selection]

    def report(self, results: Sequence[DeletionResult]) -> None:
        self.reports.append(list(results))
