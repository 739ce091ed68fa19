"""Data model for the revision graph and its mutations."""

from graphdrop.model.header import (
    ChangeId,
    CommitId,
    Description,
    LocalBranch,
    RefName,
    RemoteBranch,
    RevAuthor,
    RevHeader,
    RevId,
    TreePath,
)
from graphdrop.model.mutation import (
    AbandonRevisions,
    CopyChanges,
    ExtendParents,
    InsertRevision,
    InternalError,
    MoveBranch,
    MoveChanges,
    MutationRequest,
    MutationResult,
    PreconditionError,
    RebaseRevision,
    ReplaceParents,
    Success,
)
from graphdrop.model.operand import (
    BranchOperand,
    ChangeOperand,
    Gesture,
    MergeOperand,
    Operand,
    ParentOperand,
    RepositoryOperand,
    RevisionOperand,
    operand_adapter,
    same_entity,
)

__all__ = [
    "AbandonRevisions",
    "BranchOperand",
    "ChangeId",
    "ChangeOperand",
    "CommitId",
    "CopyChanges",
    "Description",
    "ExtendParents",
    "Gesture",
    "InsertRevision",
    "InternalError",
    "LocalBranch",
    "MergeOperand",
    "MoveBranch",
    "MoveChanges",
    "MutationRequest",
    "MutationResult",
    "Operand",
    "ParentOperand",
    "PreconditionError",
    "RebaseRevision",
    "RefName",
    "RemoteBranch",
    "ReplaceParents",
    "RepositoryOperand",
    "RevAuthor",
    "RevHeader",
    "RevId",
    "RevisionOperand",
    "Success",
    "TreePath",
    "operand_adapter",
    "same_entity",
]
