"""Execute mutation requests with the jj command line."""

from __future__ import annotations

import asyncio
import shlex
from pathlib import Path

from graphdrop.core.log import logger
from graphdrop.core.runner import Runner
from graphdrop.model.header import CommitId, RevId
from graphdrop.model.mutation import (
    AbandonRevisions,
    CopyChanges,
    ExtendParents,
    InsertRevision,
    InternalError,
    MoveBranch,
    MoveChanges,
    MutationRequest,
    MutationResult,
    PreconditionError,
    RebaseRevision,
    ReplaceParents,
    Success,
)


def _rev(rev: RevId | CommitId) -> str:
    """Revset for an id: change id for revisions, hex for commits."""
    if isinstance(rev, RevId):
        return shlex.quote(rev.change.hex)
    return shlex.quote(rev.hex)


def _destinations(parents) -> str:
    return " ".join(f"--destination {_rev(p)}" for p in parents)


def _fileset_literal(path: str) -> str:
    """Fileset matching exactly one repo path, whatever it contains."""
    escaped = path.replace("\\", "\\\\").replace('"', '\\"')
    return f'root-file:"{escaped}"'


def _paths(paths) -> str:
    return " ".join(shlex.quote(_fileset_literal(p.repo_path)) for p in paths)


class JjExecutor:
    """Runs each request as one jj command in the workspace.

    Command lines come from templates in config.commands.jj, keyed by
    the request's command name with '-' replaced by '_'.
    """

    def __init__(
        self,
        workdir: Path,
        commands: dict[str, str],
        timeout: int | None = None,
        runner: Runner | None = None,
    ):
        self.workdir = Path(workdir)
        self.commands = commands
        self.timeout = timeout
        self.runner = runner or Runner()

    def render(self, request: MutationRequest) -> str:
        """Build the jj command line for request.

        Raises:
            KeyError: If no template is configured for the command
        """
        template = self.commands[request.command.replace("-", "_")]
        return template.format(**self._arguments(request))

    def _arguments(self, request: MutationRequest) -> dict[str, str]:
        if isinstance(request, RebaseRevision):
            return {
                "id": _rev(request.id),
                "destinations": _destinations(request.parent_ids),
            }
        if isinstance(request, InsertRevision):
            return {
                "id": _rev(request.id),
                "after_id": _rev(request.after_id),
                "before_id": _rev(request.before_id),
            }
        if isinstance(request, (ExtendParents, ReplaceParents)):
            return {
                "id": _rev(request.id),
                "destinations": _destinations(request.parent_ids),
            }
        if isinstance(request, AbandonRevisions):
            return {"ids": " ".join(_rev(i) for i in request.ids)}
        if isinstance(request, (MoveChanges, CopyChanges)):
            return {
                "from_id": _rev(request.from_id),
                "to_id": _rev(request.to_id),
                "paths": _paths(request.paths),
            }
        if isinstance(request, MoveBranch):
            return {
                "name": shlex.quote(request.name.branch_name),
                "to_id": _rev(request.to_id),
            }
        raise TypeError(f"Unsupported mutation: {type(request).__name__}")

    async def execute(self, request: MutationRequest) -> MutationResult:
        if (
            isinstance(request, MoveBranch)
            and request.name.type == "RemoteBranch"
        ):
            return PreconditionError(message=f"Branch is remote: {request.name}")

        command = self.render(request)
        result = await asyncio.to_thread(
            self.runner.execute,
            command,
            cwd=self.workdir,
            timeout=self.timeout,
            check=False,
        )

        output = (result.stderr or result.stdout).strip()
        if result.exited == 0:
            return Success(message=output)
        if result.exited == -1:
            return InternalError(message=f"Timed out: {command}")

        logger.debug(
            "jj failed",
            command=command,
            exited=result.exited,
            stderr=result.stderr,
        )
        if "immutable" in result.stderr.lower():
            return PreconditionError(message=output)
        return InternalError(message=output or f"jj exited with {result.exited}")
