"""Three-way answers to "can this be dragged / dropped here"."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from graphdrop.model.header import ChangeId, CommitId

# Text interleaved with ids; ids are rendered by the view (short prefix)
RichHint = tuple[Union[str, ChangeId, CommitId], ...]


class Yes(BaseModel):
    """Allowed; hint describes what releasing will do."""

    type: Literal["yes"] = "yes"
    hint: RichHint

    model_config = ConfigDict(frozen=True)


class Maybe(BaseModel):
    """Meaningful but blocked by a precondition stated in hint."""

    type: Literal["maybe"] = "maybe"
    hint: str

    model_config = ConfigDict(frozen=True)


class No(BaseModel):
    """Not meaningful; no affordance is shown."""

    type: Literal["no"] = "no"

    model_config = ConfigDict(frozen=True)


Eligibility = Union[Yes, Maybe, No]

NO = No()


def yes(*hint: str | ChangeId | CommitId) -> Yes:
    return Yes(hint=hint)


def maybe(hint: str) -> Maybe:
    return Maybe(hint=hint)


def render_hint(eligibility: Eligibility) -> str:
    """Plain-text hint for a tooltip; empty for No."""
    if isinstance(eligibility, Yes):
        return "".join(str(part) for part in eligibility.hint)
    if isinstance(eligibility, Maybe):
        return f"({eligibility.hint})"
    return ""
