"""Mutation requests sent to the backend and the results it reports.

Fields naming a logical revision carry the full RevId so the backend
can resolve it by change id even after a rewrite; fields naming a
concrete ancestry state carry a CommitId.
"""

from __future__ import annotations

from typing import Annotated, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from graphdrop.model.header import CommitId, RefName, RevId, TreePath


class MutationRequest(BaseModel):
    """Base for requests; command is the name the backend dispatches on."""

    command: ClassVar[str]

    model_config = ConfigDict(frozen=True)

    def payload(self) -> dict:
        return self.model_dump(mode="json")


class RebaseRevision(MutationRequest):
    """Move one revision onto new parents; its children stay put."""

    command: ClassVar[str] = "rebase-revision"

    id: RevId
    parent_ids: tuple[RevId, ...]


class InsertRevision(MutationRequest):
    """Move a revision between after_id and its child before_id."""

    command: ClassVar[str] = "insert-revision"

    id: RevId
    after_id: RevId
    before_id: RevId


class ExtendParents(MutationRequest):
    """Rebase a revision and its descendants onto one more parent."""

    command: ClassVar[str] = "extend-parents"

    id: RevId
    parent_ids: tuple[CommitId, ...]


class ReplaceParents(MutationRequest):
    """Rebase a revision and its descendants onto fewer parents."""

    command: ClassVar[str] = "replace-parents"

    id: RevId
    parent_ids: tuple[CommitId, ...]


class AbandonRevisions(MutationRequest):
    command: ClassVar[str] = "abandon-revisions"

    ids: tuple[CommitId, ...]


class MoveChanges(MutationRequest):
    """Squash the given paths out of from_id into to_id."""

    command: ClassVar[str] = "move-changes"

    from_id: RevId
    to_id: CommitId
    paths: tuple[TreePath, ...]


class CopyChanges(MutationRequest):
    """Restore the given paths in to_id from the tree of from_id."""

    command: ClassVar[str] = "copy-changes"

    from_id: CommitId
    to_id: RevId
    paths: tuple[TreePath, ...]


class MoveBranch(MutationRequest):
    """Point a local branch at to_id."""

    command: ClassVar[str] = "move-branch"

    to_id: RevId
    name: RefName


class Success(BaseModel):
    type: Literal["Success"] = "Success"
    message: str = ""


class PreconditionError(BaseModel):
    """The repository refused the mutation; nothing was changed."""

    type: Literal["PreconditionError"] = "PreconditionError"
    message: str


class InternalError(BaseModel):
    type: Literal["InternalError"] = "InternalError"
    message: str


MutationResult = Annotated[
    Union[Success, PreconditionError, InternalError],
    Field(discriminator="type"),
]
