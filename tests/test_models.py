"""Tests for the branch data model."""

import pytest

from lopper.models import (
    Branch,
    BranchCollection,
    DeletionOutcome,
    DeletionResult,
    is_protected,
    is_remote_protected,
)


def test_from_branches_derives_current_name() -> None:
    collection = BranchCollection.from_branches([Branch("main"), Branch("topic", is_current=True)])
    assert collection.current_name == "topic"
    assert collection.names() == ["main", "topic"]
    assert len(collection) == 2
    assert "topic" in collection
    assert "other" not in collection


def test_from_branches_rejects_duplicates() -> None:
    with pytest.raises(ValueError, match="Duplicate"):
        BranchCollection.from_branches([Branch("topic"), Branch("topic")])


def test_two_current_branches_rejected() -> None:
    with pytest.raises(ValueError):
        BranchCollection.from_branches([Branch("a", is_current=True), Branch("b", is_current=True)])


def test_current_name_must_match_current_entry() -> None:
    with pytest.raises(ValueError):
        BranchCollection(entries={"a": Branch("a"), "b": Branch("b", is_current=True)}, current_name="a")


def test_mismatched_entry_key_rejected() -> None:
    with pytest.raises(ValueError, match="does not match"):
        BranchCollection(entries={"a": Branch("b")})


def test_empty_collection() -> None:
    collection = BranchCollection()
    assert collection.current_name == ""
    assert list(collection) == []


@pytest.mark.parametrize("name", ["main", "master"])
def test_protected_names(name: str) -> None:
    assert is_protected(name)
    assert not is_remote_protected(name)
    assert is_remote_protected(f"origin/{name}")


@pytest.mark.parametrize("name", ["mainline", "origin/feature/main", "origin/mainline", "origin/HEAD"])
def test_unprotected_names(name: str) -> None:
    assert not is_protected(name)
    assert not is_remote_protected(name)


def test_deletion_result_constructors() -> None:
    error = RuntimeError("boom")
    assert DeletionResult.deleted("a").outcome == DeletionOutcome.DELETED
    skipped = DeletionResult.protected("main")
    assert skipped.outcome == DeletionOutcome.SKIPPED
    assert skipped.reason == "protected"
    failed = DeletionResult.failed("b", error)
    assert failed.outcome == DeletionOutcome.FAILED
    assert failed.error is error
    assert failed.reason == "boom"


def test_local_name_with_slash_is_not_locally_protected() -> None:
    assert not is_protected("feature/main")
    assert not is_protected("origin/main")
