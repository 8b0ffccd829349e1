"""Git repository operations."""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Reference, Repo

from lopper.models import Branch, BranchCollection, UpstreamStatus

logger = logging.getLogger(__name__)

LOCAL_PREFIX = "refs/heads/"

# name, HEAD marker, upstream, upstream track state, short sha, subject
BRANCH_FORMAT = "--format=" + "%00".join(
    [
        "%(refname)",
        "%(HEAD)",
        "%(upstream:short)",
        "%(upstream:track)",
        "%(objectname:short=7)",
        "%(contents:subject)",
    ]
)


class DeletionFailureReason(Enum):
    """Why a branch could not be deleted."""

    NOT_FULLY_MERGED = "not fully merged"
    NOT_FOUND = "not found"
    OTHER = "other"


class GitError(Exception):
    """Git operation error."""


class FetchError(GitError):
    """Branch data could not be retrieved."""


class DeletionError(GitError):
    """A single branch could not be deleted."""

    def __init__(self, branch: str, reason: DeletionFailureReason, message: str) -> None:
        """Initialize error.

        Args:
            branch: Name of the branch that failed to delete
            reason: Classified failure reason
            message: Message reported by git
        """
        super().__init__(message)
        self.branch = branch
        self.reason = reason


def classify_deletion_failure(message: str) -> DeletionFailureReason:
    """Map a git error message onto a deletion failure reason."""
    lowered = message.lower()
    if "not fully merged" in lowered:
        return DeletionFailureReason.NOT_FULLY_MERGED
    if "not found" in lowered or "does not exist" in lowered:
        return DeletionFailureReason.NOT_FOUND
    return DeletionFailureReason.OTHER


def _command_message(err: GitCommandError) -> str:
    stderr = str(err.stderr or "").strip()
    # GitPython wraps stderr as "\n  stderr: '...'"
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:") :].strip().strip("'").strip()
    return stderr or str(err)


class VcsGateway(ABC):
    """Branch listing and branch mutation primitives.

    Listing operations are read-only. ``delete_local`` and ``delete_remote``
    mutate the repository. Nothing is retried.
    """

    @abstractmethod
    def fetch_all_branches(self) -> BranchCollection:
        """List every local branch with upstream tracking state."""

    @abstractmethod
    def fetch_merged_branches(self) -> BranchCollection:
        """List local branches merged into the current branch."""

    @abstractmethod
    def fetch_remote_branches(self) -> BranchCollection:
        """List remote-tracking branches (``origin/feature``)."""

    @abstractmethod
    def delete_local(self, name: str, *, force: bool) -> None:
        """Delete a local branch.

        Args:
            name: Branch to delete
            force: Delete even if the branch has unmerged commits

        Raises:
            DeletionError: If git refuses or fails to delete the branch
        """

    @abstractmethod
    def delete_remote(self, name: str) -> None:
        """Delete a remote-qualified branch on its remote.

        Raises:
            DeletionError: If the push fails
        """

    def last_commit_date(self, name: str) -> str:
        """Get a human readable last commit date, or an empty string."""
        return ""


class GitRepo(VcsGateway):
    """Gateway backed by a real repository through GitPython."""

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise FetchError(f"Not a git repository: {path}") from err
        if self.repo.bare:
            raise FetchError("Cannot operate on bare repository")
        logger.debug("Opened repository at %s", self.repo.working_tree_dir)

    def _parse_branch_line(self, line: str) -> Branch:
        refname, head, upstream, track, sha, subject = line.split("\x00", 5)
        if not upstream:
            status = UpstreamStatus.NONE
        elif track == "[gone]":
            status = UpstreamStatus.GONE
        else:
            status = UpstreamStatus.TRACKING
        return Branch(
            name=refname[len(LOCAL_PREFIX) :],
            is_current=head == "*",
            upstream_status=status,
            last_commit_summary=f"{sha} {subject}",
            upstream=upstream,
        )

    def _local_branches(self) -> list[Branch]:
        # git reports "[gone]" for a configured upstream whose ref no longer
        # exists, whether it lives under any remote or is a local branch
        output = self.repo.git.for_each_ref(BRANCH_FORMAT, LOCAL_PREFIX)
        return [self._parse_branch_line(line) for line in output.splitlines() if line]

    def _summary(self, ref: Reference) -> str:
        try:
            commit = ref.commit
        except ValueError:
            # Unborn branch
            return ""
        return f"{commit.hexsha[:7]} {commit.summary}"

    def fetch_all_branches(self) -> BranchCollection:
        try:
            branches = self._local_branches()
        except (GitCommandError, ValueError) as err:
            raise FetchError(f"Failed to list branches: {err}") from err
        logger.debug("Listed %d local branches", len(branches))
        return BranchCollection.from_branches(branches)

    def fetch_merged_branches(self) -> BranchCollection:
        try:
            # Full ref names: the short form becomes "heads/<name>" when a local
            # branch shares its name with a remote-tracking ref
            output = self.repo.git.branch("--merged", "--format=%(refname)")
            merged = {
                line.strip()[len(LOCAL_PREFIX) :]
                for line in output.splitlines()
                if line.strip().startswith(LOCAL_PREFIX)
            }
            branches = [branch for branch in self._local_branches() if branch.name in merged]
        except (GitCommandError, ValueError) as err:
            raise FetchError(f"Failed to list merged branches: {err}") from err
        logger.debug("Listed %d merged branches", len(branches))
        return BranchCollection.from_branches(branches)

    def fetch_remote_branches(self) -> BranchCollection:
        try:
            branches = [
                Branch(name=ref.name, last_commit_summary=self._summary(ref))
                for remote in self.repo.remotes
                for ref in remote.refs
                # Skip symbolic refs such as origin/HEAD
                if not ref.name.endswith("/HEAD")
            ]
        except (GitCommandError, ValueError) as err:
            raise FetchError(f"Failed to list remote branches: {err}") from err
        logger.debug("Listed %d remote branches", len(branches))
        return BranchCollection.from_branches(branches)

    def delete_local(self, name: str, *, force: bool) -> None:
        flag = "-D" if force else "-d"
        logger.debug("git branch %s %s", flag, name)
        try:
            self.repo.git.branch(flag, name)
        except GitCommandError as err:
            message = _command_message(err)
            raise DeletionError(name, classify_deletion_failure(message), message) from err

    def delete_remote(self, name: str) -> None:
        if "/" not in name:
            raise DeletionError(name, DeletionFailureReason.OTHER, f"Not a remote branch: {name}")
        remote_name, branch = name.split("/", 1)
        if remote_name not in {remote.name for remote in self.repo.remotes}:
            raise DeletionError(name, DeletionFailureReason.NOT_FOUND, f"No such remote: {remote_name}")
        logger.debug("git push %s --delete %s", remote_name, branch)
        try:
            self.repo.git.push(remote_name, "--delete", branch)
        except GitCommandError as err:
            message = _command_message(err)
            raise DeletionError(name, classify_deletion_failure(message), message) from err

    def last_commit_date(self, name: str) -> str:
        try:
            return str(
                self.repo.git.log(
                    "-1",
                    "--format=%cd",
                    "--date=format:'%a - %B %d @ %H:%M'",
                    name,
                    "--",
                ).strip("'")
            )
        except GitCommandError:
            return ""
