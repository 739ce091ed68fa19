"""Fire-and-forget delivery of mutation requests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

from graphdrop.core.log import logger
from graphdrop.model.mutation import (
    InternalError,
    MutationRequest,
    MutationResult,
    Success,
)

Listener = Callable[[MutationRequest, MutationResult], None]


class Executor(Protocol):
    """Backend that carries out one mutation request."""

    async def execute(self, request: MutationRequest) -> MutationResult:
        ...


class MutationSlot:
    """Holds the most recent mutation and its result for display.

    Results land here in completion order, which need not be
    submission order.
    """

    def __init__(self):
        self.request: MutationRequest | None = None
        self.result: MutationResult | None = None
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener for every result; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def put(self, request: MutationRequest, result: MutationResult) -> None:
        self.request = request
        self.result = result
        for listener in list(self._listeners):
            try:
                listener(request, result)
            except Exception as e:
                logger.error(
                    "Mutation listener failed",
                    command=request.command,
                    exception_type=type(e).__name__,
                    exception_message=str(e),
                )

    def clear(self) -> None:
        self.request = None
        self.result = None


class MutationChannel:
    """Sends requests to an executor and reports results to a slot.

    submit() must be called with an asyncio loop running; it schedules
    the delivery and returns at once. There is no retry and no timeout
    here.
    """

    def __init__(self, executor: Executor, slot: MutationSlot | None = None):
        self.executor = executor
        self.slot = slot or MutationSlot()
        self._pending: set[asyncio.Task] = set()

    def submit(self, request: MutationRequest) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._deliver(request))
        # the loop only keeps weak references to tasks
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait until every submitted request has a result."""
        while self._pending:
            await asyncio.gather(*self._pending)

    async def _deliver(self, request: MutationRequest) -> None:
        with logger.span(f"Executing {request.command}", command=request.command):
            try:
                result = await self.executor.execute(request)
            except Exception as e:
                logger.error(
                    f"Executor raised during {request.command}",
                    command=request.command,
                    exception_type=type(e).__name__,
                    exception_message=str(e),
                )
                result = InternalError(message=f"{type(e).__name__}: {e}")

        if result.type == "Success":
            logger.info(f"{request.command} succeeded", message=result.message)
        else:
            logger.warn(
                f"{request.command} failed",
                result=result.type,
                message=result.message,
            )
        self.slot.put(request, result)


class DryRunExecutor:
    """Logs each request instead of changing the repository."""

    def __init__(self):
        self.executed: list[MutationRequest] = []

    async def execute(self, request: MutationRequest) -> MutationResult:
        self.executed.append(request)
        logger.info(
            f"[dry-run] {request.command}",
            payload=request.payload(),
        )
        return Success(message=f"dry run: {request.command}")
