"""Drop rules: one entry per (source type, target type) pair.

Each entry pairs the classifier that decides whether a drop is allowed
with the builder for the request it issues, so a drop that shows a
"yes" hint always has exactly one mutation behind it. Pairs that are
not listed are never droppable.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from graphdrop.engine.eligibility import NO, Eligibility, maybe, yes
from graphdrop.model.mutation import (
    AbandonRevisions,
    CopyChanges,
    ExtendParents,
    InsertRevision,
    MoveBranch,
    MoveChanges,
    MutationRequest,
    RebaseRevision,
    ReplaceParents,
)
from graphdrop.model.operand import (
    BranchOperand,
    ChangeOperand,
    MergeOperand,
    ParentOperand,
    RepositoryOperand,
    RevisionOperand,
)


@dataclass(frozen=True)
class Rule:
    classify: Callable[..., Eligibility]
    build: Callable[..., MutationRequest]


# Revision -> Revision: rebase onto a single new parent

def _rebase_classify(source: RevisionOperand, target: RevisionOperand):
    return yes(
        "Rebasing revision ", source.header.id.change,
        " onto ", target.header.id.change,
    )


def _rebase_build(source: RevisionOperand, target: RevisionOperand):
    return RebaseRevision(id=source.header.id, parent_ids=(target.header.id,))


# Revision -> Parent: insert between the parent and its child

def _insert_classify(source: RevisionOperand, target: ParentOperand):
    if target.child.id == source.header.id:
        return NO
    if target.child.is_immutable:
        return maybe("can't insert before an immutable revision")
    return yes(
        "Inserting revision ", source.header.id.change,
        " before ", target.child.id.change,
    )


def _insert_build(source: RevisionOperand, target: ParentOperand):
    return InsertRevision(
        id=source.header.id,
        after_id=target.header.id,
        before_id=target.child.id,
    )


# Revision -> Merge: add the source as one more parent of the target

def _extend_classify(source: RevisionOperand, target: MergeOperand):
    if target.header.id.change == source.header.id.change:
        return NO
    return yes("Adding parent to revision ", target.header.id.change)


def _extend_build(source: RevisionOperand, target: MergeOperand):
    return ExtendParents(
        id=target.header.id,
        parent_ids=(*target.header.parent_ids, source.header.id.commit),
    )


# Revision -> Repository: abandon

def _abandon_classify(source: RevisionOperand, target: RepositoryOperand):
    return yes("Abandoning commit ", source.header.id.commit)


def _abandon_build(source: RevisionOperand, target: RepositoryOperand):
    return AbandonRevisions(ids=(source.header.id.commit,))


# Parent -> Repository: drop one parent of the child

def _remove_parent_classify(source: ParentOperand, target: RepositoryOperand):
    return yes("Removing parent from revision ", source.child.id.change)


def _remove_parent_build(source: ParentOperand, target: RepositoryOperand):
    removed = source.header.id.commit
    return ReplaceParents(
        id=source.child.id,
        parent_ids=tuple(p for p in source.child.parent_ids if p != removed),
    )


# Change -> Revision: squash one path into another revision

def _squash_classify(source: ChangeOperand, target: RevisionOperand):
    if target.header.id.change == source.header.id.change:
        return NO
    if target.header.is_immutable:
        return maybe("revision is immutable")
    return yes(
        f"Squashing changes at {source.path.relative_path} into ",
        target.header.id.change,
    )


def _squash_build(source: ChangeOperand, target: RevisionOperand):
    return MoveChanges(
        from_id=source.header.id,
        to_id=target.header.id.commit,
        paths=(source.path,),
    )


# Change -> Repository: restore one path from the only parent

def _restore_classify(source: ChangeOperand, target: RepositoryOperand):
    if len(source.header.parent_ids) != 1:
        return maybe("can't restore: revision has multiple parents")
    return yes(
        f"Restoring changes at {source.path.relative_path} from parent ",
        source.header.parent_ids[0],
    )


def _restore_build(source: ChangeOperand, target: RepositoryOperand):
    return CopyChanges(
        from_id=source.header.parent_ids[0],
        to_id=source.header.id,
        paths=(source.path,),
    )


# Branch -> Revision / Branch: point the local branch somewhere else

def _move_branch_classify(source: BranchOperand, target: RevisionOperand):
    return yes(
        f"Moving branch {source.name.branch_name} to ",
        target.header.id.change,
    )


def _reset_branch_classify(source: BranchOperand, target: BranchOperand):
    if source.name.branch_name != target.name.branch_name:
        return NO
    return yes(f"Resetting branch {source.name.branch_name} to remote")


def _move_branch_build(source: BranchOperand, target):
    return MoveBranch(to_id=target.header.id, name=source.name)


DROP_RULES: dict[tuple[str, str], Rule] = {
    ("Revision", "Revision"): Rule(_rebase_classify, _rebase_build),
    ("Revision", "Parent"): Rule(_insert_classify, _insert_build),
    ("Revision", "Merge"): Rule(_extend_classify, _extend_build),
    ("Revision", "Repository"): Rule(_abandon_classify, _abandon_build),
    ("Parent", "Repository"): Rule(_remove_parent_classify, _remove_parent_build),
    ("Change", "Revision"): Rule(_squash_classify, _squash_build),
    ("Change", "Repository"): Rule(_restore_classify, _restore_build),
    ("Branch", "Revision"): Rule(_move_branch_classify, _move_branch_build),
    ("Branch", "Branch"): Rule(_reset_branch_classify, _move_branch_build),
}
