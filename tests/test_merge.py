from pathlib import Path

import pytest

from gitlet.config import GitletSettings
from gitlet.errors import DirtyState, NoSuchBranch, SelfMerge, UntrackedOverwrite
from gitlet.merge import FileAction, MergeOutcome, classify, conflict_content
from gitlet.repository import Repository, open_repository

S, C, G = "s" * 40, "c" * 40, "g" * 40


@pytest.mark.parametrize(
    "current, given, split, expected",
    [
        (S, G, S, FileAction.TAKE_GIVEN),
        (S, None, S, FileAction.REMOVE),
        (C, S, S, FileAction.KEEP),
        (None, None, S, FileAction.KEEP),
        (S, S, S, FileAction.KEEP),
        (C, None, None, FileAction.KEEP),
        (None, G, None, FileAction.TAKE_GIVEN),
        (G, G, S, FileAction.KEEP),
        (C, G, S, FileAction.CONFLICT),
        (C, G, None, FileAction.CONFLICT),
        (None, G, S, FileAction.CONFLICT),
        (C, None, S, FileAction.CONFLICT),
    ],
    ids=[
        "modified-in-given",
        "removed-in-given",
        "modified-in-current",
        "removed-in-both",
        "untouched",
        "added-in-current",
        "added-in-given",
        "same-change",
        "both-modified",
        "both-added",
        "removed-in-current-modified-in-given",
        "modified-in-current-removed-in-given",
    ],
)
def test_classify(current, given, split, expected):
    assert classify(current, given, split) is expected


def test_conflict_content():
    assert conflict_content(b"X", b"Y") == b"<<<<<<< HEAD\nX=======\nY>>>>>>>\n"
    assert conflict_content(None, b"Y\n") == b"<<<<<<< HEAD\n=======\nY\n>>>>>>>\n"


def commit_file(repo: Repository, name: str, text: str, message: str) -> str:
    (repo.work_dir / name).write_text(text)
    repo.add(name)
    return repo.commit(message)


def test_conflicting_merge(work_dir: Path, settings: GitletSettings):
    with open_repository(work_dir, settings) as repo:
        repo.create_branch("feat")
        master_head = commit_file(repo, "a.txt", "X", "master edit")
        repo.switch_branch("feat")
        feat_head = commit_file(repo, "a.txt", "Y", "feat edit")
        repo.switch_branch("master")

        result = repo.merge("feat")

        assert result.outcome is MergeOutcome.MERGED
        assert result.conflicted is True
        assert result.conflicts == ["a.txt"]
        assert (work_dir / "a.txt").read_text() == "<<<<<<< HEAD\nX=======\nY>>>>>>>\n"

        merged = repo.head_commit()
        assert repo.head_id == result.commit_id
        assert merged.parent_id == master_head
        assert merged.second_parent_id == feat_head
        assert merged.message == "Merged feat into master."
        assert repo.store.get_blob(merged.files["a.txt"]) == (work_dir / "a.txt").read_bytes()
        assert repo.is_dirty() is False


def test_clean_merge(work_dir: Path, settings: GitletSettings):
    with open_repository(work_dir, settings) as repo:
        commit_file(repo, "shared.txt", "base", "base shared")
        commit_file(repo, "doomed.txt", "base", "base doomed")
        repo.create_branch("feat")

        commit_file(repo, "mine.txt", "mine", "master only")

        repo.switch_branch("feat")
        commit_file(repo, "shared.txt", "feat version", "feat shared")
        commit_file(repo, "theirs.txt", "theirs", "feat new file")
        repo.remove("doomed.txt")
        repo.commit("feat removes doomed")
        repo.switch_branch("master")

        result = repo.merge("feat")

        assert result.outcome is MergeOutcome.MERGED
        assert result.conflicted is False
        assert (work_dir / "shared.txt").read_text() == "feat version"
        assert (work_dir / "theirs.txt").read_text() == "theirs"
        assert (work_dir / "mine.txt").read_text() == "mine"
        assert not (work_dir / "doomed.txt").exists()
        assert sorted(repo.head_commit().files) == ["mine.txt", "shared.txt", "theirs.txt"]


def test_fast_forward(work_dir: Path, settings: GitletSettings):
    with open_repository(work_dir, settings) as repo:
        repo.create_branch("feat")
        repo.switch_branch("feat")
        feat_head = commit_file(repo, "a.txt", "a", "feat work")
        repo.switch_branch("master")
        commits_before = set(repo.store.commit_ids())
        master_head = repo.head_id

        result = repo.merge("feat")

        assert result.outcome is MergeOutcome.FAST_FORWARDED
        assert result.commit_id == feat_head
        assert repo.current_branch == "feat", "Fast-forward checks out the given branch"
        assert repo.head_id == feat_head
        assert repo.refs.get("master") == master_head, "The previous branch does not move"
        assert repo.is_dirty() is False
        assert set(repo.store.commit_ids()) == commits_before, "No new commit on fast-forward"
        assert (work_dir / "a.txt").read_text() == "a"


def test_given_is_ancestor(work_dir: Path, settings: GitletSettings):
    with open_repository(work_dir, settings) as repo:
        repo.create_branch("old")
        head = commit_file(repo, "a.txt", "a", "ahead")

        result = repo.merge("old")

        assert result.outcome is MergeOutcome.ALREADY_ANCESTOR
        assert result.commit_id is None
        assert repo.head_id == head


def test_merge_preconditions(work_dir: Path, settings: GitletSettings):
    with open_repository(work_dir, settings) as repo:
        repo.create_branch("feat")
        with pytest.raises(SelfMerge):
            repo.merge("master")
        with pytest.raises(NoSuchBranch):
            repo.merge("nope")

        (work_dir / "a.txt").write_text("a")
        repo.add("a.txt")
        with pytest.raises(DirtyState):
            repo.merge("feat")


def test_merge_untracked_overwrite(work_dir: Path, settings: GitletSettings):
    with open_repository(work_dir, settings) as repo:
        repo.create_branch("feat")
        commit_file(repo, "mine.txt", "mine", "master work")
        repo.switch_branch("feat")
        commit_file(repo, "b.txt", "feat b", "feat work")
        repo.switch_branch("master")
        head = repo.head_id

        (work_dir / "b.txt").write_text("my own b")
        with pytest.raises(UntrackedOverwrite):
            repo.merge("feat")

        assert repo.head_id == head
        assert (work_dir / "b.txt").read_text() == "my own b"
