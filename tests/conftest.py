"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest
from git import Actor, Repo
from typer.testing import CliRunner

from lopper.fake import FakeGitRepo
from lopper.models import Branch, UpstreamStatus


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a local repository with a bare remote.

    Local branches:
        main            tracking, protected
        feature/merged  tracking, merged into feature/current
        feature/test    tracking, unmerged
        feature/gone    upstream deleted, unmerged
        feature/current tracking, checked out
    Remote-only branch:
        origin/feature/remote

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True)
    local_repo = Repo.init(local_path)

    author = Actor("Test User", "test@example.com")
    with local_repo.config_writer() as config:
        config.set_value("user", "name", author.name)
        config.set_value("user", "email", author.email)

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)

    # init.defaultBranch may be master; work on main either way
    if "main" not in local_repo.heads:
        local_repo.create_head("main")
    main_branch = local_repo.heads.main
    main_branch.checkout()

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")
    main_branch.set_tracking_branch(origin.refs.main)

    def create_branch(name: str, merge: bool = False) -> None:
        main_branch.checkout()
        branch = local_repo.create_head(name)
        branch.checkout()

        file_name = name.replace("/", "_") + ".txt"
        (local_path / file_name).write_text(f"{name} content")
        local_repo.index.add([file_name])
        local_repo.index.commit(f"Add {name}", author=author)

        origin.push(name)
        branch.set_tracking_branch(origin.refs[name])

        if merge:
            main_branch.checkout()
            local_repo.git.merge(name, "--no-ff")
            origin.push("main")

    create_branch("feature/test")
    create_branch("feature/merged", merge=True)
    create_branch("feature/current")
    create_branch("feature/gone")
    # Deleting on the remote also drops origin/feature/gone locally
    origin.push(":feature/gone")

    # Remote-only branch pointing at main
    main_branch.checkout()
    origin.push("main:feature/remote")

    local_repo.heads["feature/current"].checkout()

    yield local_path, remote_path


@pytest.fixture
def test_repo(test_env: tuple[Path, Path]) -> Path:
    local_path, _ = test_env
    return local_path


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def branches() -> list[Branch]:
    """Local branches matching the layout of ``test_env``, as plain data."""
    return [
        Branch("main", upstream_status=UpstreamStatus.TRACKING, last_commit_summary="a1 Merge", upstream="origin/main"),
        Branch(
            "feature/current",
            is_current=True,
            upstream_status=UpstreamStatus.TRACKING,
            last_commit_summary="c3 Add current",
            upstream="origin/feature/current",
        ),
        Branch(
            "feature/merged",
            upstream_status=UpstreamStatus.TRACKING,
            last_commit_summary="b2 Add merged",
            upstream="origin/feature/merged",
        ),
        Branch(
            "feature/gone",
            upstream_status=UpstreamStatus.GONE,
            last_commit_summary="d4 Add gone",
            upstream="origin/feature/gone",
        ),
        Branch("wip", last_commit_summary="e5 Work in progress"),
    ]


@pytest.fixture
def fake(branches: list[Branch]) -> FakeGitRepo:
    return FakeGitRepo(
        branches=branches,
        merged=["main", "feature/merged"],
        remote_branches=[
            Branch("origin/main"),
            Branch("origin/feature/merged"),
            Branch("origin/feature/current"),
        ],
        unmerged=["feature/gone", "wip"],
    )
