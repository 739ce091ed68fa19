"""Drop command - submit the mutation for a gesture."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from graphdrop.command.check import load_gesture
from graphdrop.core.log import logger
from graphdrop.engine import can_drop, render_hint, submit_drop
from graphdrop.transport import MutationChannel, create_executor


class DropCommand(BaseModel):
    """Submit the mutation a gesture stands for and report the result.

    Uses the executor selected by config.dispatch.executor; the
    default dry-run executor only logs the request.
    """

    gesture: Path = Field(
        description="YAML or JSON file with 'from' and 'to' operands"
    )

    async def run_workflow(self, state: "State") -> int:
        """Run drop.

        Returns:
            Exit code (0=mutation succeeded, 1=rejected or failed)
        """
        drop_state = state.runtime.drop
        gesture = load_gesture(self.gesture)

        channel = MutationChannel(create_executor(state.config))
        request = submit_drop(gesture.source, gesture.target, channel)
        if request is None:
            drop_state.status = "rejected"
            eligibility = can_drop(gesture.source, gesture.target)
            print(f"not droppable {render_hint(eligibility)}".rstrip())
            return 1

        drop_state.request = request
        drop_state.status = "submitted"

        # Only the command line waits; the engine never does
        await channel.drain()

        drop_state.result = channel.slot.result
        drop_state.status = "complete"

        result = channel.slot.result
        print(f"{request.command}: {result.type} {result.message}".rstrip())
        logger.info("Drop complete", command=request.command, result=result.type)
        return 0 if result.type == "Success" else 1
