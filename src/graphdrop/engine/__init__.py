"""Drag-and-drop mutation resolution for the revision graph."""

from graphdrop.engine.eligibility import (
    Eligibility,
    Maybe,
    No,
    RichHint,
    Yes,
    render_hint,
)
from graphdrop.engine.mutator import Submitter, can_drag, can_drop, submit_drop
from graphdrop.engine.selection import recover_selection

__all__ = [
    "Eligibility",
    "Maybe",
    "No",
    "RichHint",
    "Submitter",
    "Yes",
    "can_drag",
    "can_drop",
    "recover_selection",
    "render_hint",
    "submit_drop",
]
