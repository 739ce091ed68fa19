"""Drag-and-drop mutations between two operands."""

from __future__ import annotations

from typing import Protocol

from graphdrop.core.log import logger
from graphdrop.engine.eligibility import NO, Eligibility, Yes, maybe, yes
from graphdrop.engine.rules import DROP_RULES
from graphdrop.model.mutation import MutationRequest
from graphdrop.model.operand import Operand, same_entity


class Submitter(Protocol):
    """Outbound channel; submit() must return without waiting."""

    def submit(self, request: MutationRequest) -> None:
        ...


def can_drag(source: Operand) -> Eligibility:
    """Whether picking up source means anything, whatever the target."""
    # finalised history can't be rewritten
    if source.type in ("Revision", "Change") and source.header.is_immutable:
        return maybe("revision is immutable")

    # removing a parent rewrites the child
    if source.type == "Parent":
        if source.child.is_immutable:
            return maybe("child is immutable")
        if len(source.child.parent_ids) == 1:
            return maybe("child has only one parent")

    # remote branches only move by fetching
    if source.type == "Branch" and source.name.type == "RemoteBranch":
        return maybe("branch is remote")

    if source.type == "Revision":
        return yes("Rebasing revision ", source.header.id.change)
    if source.type == "Parent":
        return yes("Removing parent from revision ", source.child.id.change)
    if source.type == "Change":
        return yes(f"Squashing changes at {source.path.relative_path}")
    if source.type == "Branch":
        return yes(f"Moving branch {source.name.branch_name}")

    return NO


def can_drop(source: Operand, target: Operand) -> Eligibility:
    """Whether releasing source over target is a legal mutation."""
    # Adding a parent leaves the source where it is, so an immutable
    # revision may still become a parent of a merge
    adds_parent = source.type == "Revision" and target.type == "Merge"
    if not isinstance(can_drag(source), Yes) and not adds_parent:
        return NO
    if same_entity(source, target):
        return NO

    rule = DROP_RULES.get((source.type, target.type))
    if rule is None:
        return NO

    eligibility = rule.classify(source, target)
    logger.spew(
        "Drop classified",
        source=source.type,
        target=target.type,
        eligibility=eligibility.type,
    )
    return eligibility


def submit_drop(
    source: Operand, target: Operand, channel: Submitter
) -> MutationRequest | None:
    """Issue the mutation for a completed drop, if it is legal.

    At most one request is submitted. The result arrives later through
    whatever the channel reports to; nothing here waits for it.

    Returns:
        The submitted request, or None if the drop was not allowed
    """
    eligibility = can_drop(source, target)
    if not isinstance(eligibility, Yes):
        logger.debug(
            "Ignoring drop that is not allowed",
            source=source.type,
            target=target.type,
            eligibility=eligibility.type,
        )
        return None

    rule = DROP_RULES.get((source.type, target.type))
    request = rule.build(source, target) if rule else None
    if request is None:
        logger.error(
            "Allowed drop has no mutation",
            source=source.type,
            target=target.type,
        )
        return None

    logger.info(
        f"Submitting {request.command}",
        command=request.command,
        payload=request.payload(),
    )
    channel.submit(request)
    return request
