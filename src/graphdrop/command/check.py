"""Check command - classify a gesture without submitting it."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from graphdrop.core.log import logger
from graphdrop.engine import can_drag, can_drop, render_hint
from graphdrop.model.operand import Gesture


class GestureFileError(Exception):
    """Gesture file is missing, unreadable or not valid YAML."""


def load_gesture(path: Path) -> Gesture:
    """Read a gesture ({from: operand, to: operand}) from YAML or JSON.

    Raises:
        GestureFileError: If the file cannot be read or parsed
        pydantic.ValidationError: If the file does not describe a gesture
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GestureFileError(f"{path}: {e}") from e
    return Gesture.model_validate(data)


class CheckCommand(BaseModel):
    """Show whether a gesture can be dragged and dropped.

    Prints the drag and drop eligibility with the hint the graph
    would display. Nothing is submitted.
    """

    gesture: Path = Field(
        description="YAML or JSON file with 'from' and 'to' operands"
    )

    async def run_workflow(self, state: "State") -> int:
        """Run check.

        Returns:
            Exit code (0=droppable, 1=not droppable)
        """
        gesture = load_gesture(self.gesture)
        logger.debug(
            "Checking gesture",
            source=gesture.source.type,
            target=gesture.target.type,
        )

        drag = can_drag(gesture.source)
        drop = can_drop(gesture.source, gesture.target)

        print(f"drag: {drag.type} {render_hint(drag)}".rstrip())
        print(f"drop: {drop.type} {render_hint(drop)}".rstrip())
        return 0 if drop.type == "yes" else 1
