"""Things that can be dragged or dropped on in the revision graph.

An operand is built fresh from the latest snapshot each time the graph
is drawn, so two operands for the same entity are usually different
objects. same_entity() compares identity values instead.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from graphdrop.model.header import RefName, RevHeader, TreePath


class _Operand(BaseModel):
    model_config = ConfigDict(frozen=True)

    def identity(self) -> tuple:
        """Identity values that make two operands the same entity."""
        raise NotImplementedError


class RepositoryOperand(_Operand):
    """The repository itself; dropping here removes things."""

    type: Literal["Repository"] = "Repository"

    def identity(self) -> tuple:
        return ()


class RevisionOperand(_Operand):
    """A whole revision."""

    type: Literal["Revision"] = "Revision"
    header: RevHeader

    def identity(self) -> tuple:
        return (self.header.id.change.hex, self.header.id.commit.hex)


class MergeOperand(_Operand):
    """A revision targeted as a point to add parents to."""

    type: Literal["Merge"] = "Merge"
    header: RevHeader

    def identity(self) -> tuple:
        return (self.header.id.change.hex, self.header.id.commit.hex)


class ParentOperand(_Operand):
    """The edge from child to one of its parents, header."""

    type: Literal["Parent"] = "Parent"
    header: RevHeader
    child: RevHeader

    @model_validator(mode='after')
    def _header_is_parent_of_child(self) -> 'ParentOperand':
        if self.header.id.commit not in self.child.parent_ids:
            raise ValueError(
                f"{self.header.id.commit.hex} is not a parent of "
                f"{self.child.id.commit.hex}"
            )
        return self

    def identity(self) -> tuple:
        return (
            self.header.id.change.hex, self.header.id.commit.hex,
            self.child.id.change.hex, self.child.id.commit.hex,
        )


class ChangeOperand(_Operand):
    """One path's changes as they appear in header."""

    type: Literal["Change"] = "Change"
    header: RevHeader
    path: TreePath

    def identity(self) -> tuple:
        return (
            self.header.id.change.hex, self.header.id.commit.hex,
            self.path.repo_path,
        )


class BranchOperand(_Operand):
    """A branch reference currently pointing at header."""

    type: Literal["Branch"] = "Branch"
    header: RevHeader
    name: RefName

    def identity(self) -> tuple:
        remote = getattr(self.name, "remote_name", None)
        return (
            self.header.id.change.hex, self.header.id.commit.hex,
            self.name.type, self.name.branch_name, remote,
        )


Operand = Annotated[
    Union[
        RepositoryOperand,
        RevisionOperand,
        MergeOperand,
        ParentOperand,
        ChangeOperand,
        BranchOperand,
    ],
    Field(discriminator="type"),
]

OperandType = Literal["Repository", "Revision", "Merge", "Parent", "Change", "Branch"]

operand_adapter: TypeAdapter[Operand] = TypeAdapter(Operand)


def same_entity(a: Operand, b: Operand) -> bool:
    """True if a and b denote the same entity, however often re-rendered."""
    return a.type == b.type and a.identity() == b.identity()


class Gesture(BaseModel):
    """A completed or prospective drag: source dropped on target."""

    source: Operand = Field(alias="from")
    target: Operand = Field(alias="to")

    model_config = ConfigDict(frozen=True, populate_by_name=True)
