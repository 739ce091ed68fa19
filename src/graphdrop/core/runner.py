"""Command execution using the invoke library."""

from pathlib import Path

from invoke import Context, Result
from invoke.exceptions import CommandTimedOut

from graphdrop.core.log import logger


class Runner(Context):
    """invoke.Context with a single captured-output execute()."""

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        check: bool = True,
        env: dict[str, str] | None = None,
    ) -> Result:
        """Execute a command and capture its output.

        Args:
            command: Command string to execute
            cwd: Working directory for command execution
            timeout: Maximum execution time in seconds
            check: If True, raise exception on non-zero exit code
            env: Environment variables added to os.environ

        Returns:
            invoke.Result with stdout, stderr, exited (return code);
            a timed out command reports exited == -1

        Raises:
            invoke.UnexpectedExit: If check=True and command
                returns non-zero
        """
        kwargs = {
            "hide": True,
            "warn": not check,
            "in_stream": False,
        }
        if timeout:
            kwargs["timeout"] = timeout
        if env:
            kwargs["env"] = env

        logger.debug("Running command", command=command, cwd=str(cwd or "."))

        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            result = e.result
            result.exited = -1

        logger.spew(
            "Command finished",
            command=command,
            exited=result.exited,
            stdout_bytes=len(result.stdout),
            stderr_bytes=len(result.stderr),
        )
        return result
