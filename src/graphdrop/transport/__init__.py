"""Delivery of mutation requests to a backend."""

from graphdrop.core.log import logger
from graphdrop.transport.channel import (
    DryRunExecutor,
    Executor,
    MutationChannel,
    MutationSlot,
)
from graphdrop.transport.jj import JjExecutor


def create_executor(config) -> Executor:
    """Build the executor selected by config.dispatch.executor."""
    if config.dispatch.executor == "jj":
        logger.debug("Using jj executor", workdir=str(config.repo.workdir))
        return JjExecutor(
            workdir=config.repo.workdir,
            commands=config.commands.get("jj", {}),
            timeout=config.dispatch.timeout,
        )
    return DryRunExecutor()


__all__ = [
    "DryRunExecutor",
    "Executor",
    "JjExecutor",
    "MutationChannel",
    "MutationSlot",
    "create_executor",
]
