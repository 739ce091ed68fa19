"""Snapshots of repository entities as drawn in the revision graph."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _HexId(BaseModel):
    """A hex identifier with the shortest prefix that is unambiguous."""

    hex: str = Field(description="Full hex identifier")
    prefix: str = Field(description="Shortest unique prefix of hex")
    rest: str = Field(default="", description="Remainder shown dimmed")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_hex(cls, value: str, prefix_len: int = 8, rest_len: int = 4):
        return cls(
            hex=value,
            prefix=value[:prefix_len],
            rest=value[prefix_len:prefix_len + rest_len],
        )

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.hex == other.hex

    def __hash__(self):
        return hash((type(self).__name__, self.hex))

    def __str__(self):
        return self.prefix


class ChangeId(_HexId):
    """Identity of a logical change; stable across rewrites."""
    type: Literal["ChangeId"] = "ChangeId"


class CommitId(_HexId):
    """Content hash of one concrete commit."""
    type: Literal["CommitId"] = "CommitId"


class RevId(BaseModel):
    """Identity pair of a revision."""

    change: ChangeId
    commit: CommitId

    model_config = ConfigDict(frozen=True)


class TreePath(BaseModel):
    """A file or directory inside a revision's tree."""

    repo_path: str = Field(description="Path in repository notation ('/' separated)")
    relative_path: str = Field(description="Path as displayed to the user")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_repo_path(cls, repo_path: str) -> TreePath:
        return cls(repo_path=repo_path, relative_path=repo_path)


class LocalBranch(BaseModel):
    type: Literal["LocalBranch"] = "LocalBranch"
    branch_name: str
    has_conflict: bool = False
    is_synced: bool = Field(
        default=True,
        description="Local target matches every tracked remote",
    )
    tracking_remotes: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __str__(self):
        return self.branch_name


class RemoteBranch(BaseModel):
    type: Literal["RemoteBranch"] = "RemoteBranch"
    branch_name: str
    remote_name: str
    has_conflict: bool = False
    is_synced: bool = Field(
        default=True,
        description="Remote target matches the local branch of the same name",
    )
    is_tracked: bool = False

    model_config = ConfigDict(frozen=True)

    def __str__(self):
        return f"{self.branch_name}@{self.remote_name}"


RefName = Annotated[Union[LocalBranch, RemoteBranch], Field(discriminator="type")]


class RevAuthor(BaseModel):
    email: str = ""
    name: str = ""
    timestamp: datetime | None = None

    model_config = ConfigDict(frozen=True)


class Description(BaseModel):
    lines: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def summary(self) -> str:
        return self.lines[0] if self.lines else ""


class RevHeader(BaseModel):
    """Snapshot of a revision taken when the graph was rendered.

    Never updated in place; a refreshed graph brings a new header.
    """

    id: RevId
    description: Description = Field(default_factory=Description)
    author: RevAuthor = Field(default_factory=RevAuthor)
    has_conflict: bool = False
    is_working_copy: bool = False
    is_immutable: bool = False
    refs: tuple[RefName, ...] = ()
    parent_ids: tuple[CommitId, ...] = Field(
        default=(),
        description="Parent commits in order; empty only for the root",
    )

    model_config = ConfigDict(frozen=True)
