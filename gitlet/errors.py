"""Gitlet exception hierarchy."""


class GitletError(Exception):
    """Base exception for all gitlet errors.

    ``message`` is the single line shown to the user by the command layer.
    """

    default_message = "Gitlet error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UsageError(GitletError):
    default_message = "Incorrect operands."


class UninitializedRepo(GitletError):
    default_message = "Not in an initialized Gitlet directory."


class AlreadyInitialized(GitletError):
    default_message = (
        "A Gitlet version-control system already exists in the current directory."
    )


class RepositoryLocked(GitletError):
    default_message = "Another gitlet command is running in this repository."


class NotFound(GitletError):
    """A blob, commit, branch or file could not be found."""

    default_message = "Not found."


class ObjectNotFound(NotFound):
    def __init__(self, kind: str, object_id: str) -> None:
        super().__init__(f"No {kind} object with id {object_id}.")
        self.kind = kind
        self.object_id = object_id


class NoSuchBranch(NotFound):
    default_message = "A branch with that name does not exist."


class NoSuchCommit(NotFound):
    default_message = "No commit with that id exists."


class FileNotInCommit(NotFound):
    default_message = "File does not exist in that commit."


class FileNotFound(NotFound):
    default_message = "File does not exist."


class NoCommitWithMessage(NotFound):
    default_message = "Found no commit with that message."


class AmbiguousCommitId(GitletError):
    default_message = "Commit id prefix matches more than one commit."


class NothingToRemove(GitletError):
    default_message = "No reason to remove the file."


class EmptyCommit(GitletError):
    default_message = "No changes added to the commit."


class MissingCommitMessage(GitletError):
    default_message = "Please enter a commit message."


class BranchExists(GitletError):
    default_message = "A branch with that name already exists."


class CannotRemoveCurrentBranch(GitletError):
    default_message = "Cannot remove the current branch."


class SameBranch(GitletError):
    default_message = "No need to checkout the current branch."


class UntrackedOverwrite(GitletError):
    default_message = (
        "There is an untracked file in the way; "
        "delete it, or add and commit it first."
    )

    def __init__(self, path: str | None = None) -> None:
        super().__init__()
        self.path = path


class SelfMerge(GitletError):
    default_message = "Cannot merge a branch with itself."


class DirtyState(GitletError):
    default_message = "You have uncommitted changes."
