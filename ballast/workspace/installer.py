"""Interfaces for invoking ``pnpm install``."""

from __future__ import annotations

import asyncio
import logging
import typing as typ

import msgspec
from plumbum import local
from plumbum.commands.processes import BY_TYPE, CommandNotFound, iter_lines

from ballast.utils import normalise_workspace_root

from .models import WorkspaceError

if typ.TYPE_CHECKING:
    from pathlib import Path

    from plumbum.commands.base import BoundCommand

LOGGER = logging.getLogger(__name__)

_STDOUT: typ.Final[int] = 1


class InstallError(WorkspaceError):
    """Raised when ``pnpm install`` cannot be run to completion."""


class PnpmExecutableNotFoundError(InstallError):
    """Raised when the ``pnpm`` executable is missing from ``PATH``."""

    def __init__(self) -> None:
        """Initialise the error with a descriptive message."""
        super().__init__("The 'pnpm' executable could not be located.")


class InstallProcessError(InstallError):
    """Raised when the install process fails to spawn or its streams break."""

    def __init__(self, detail: str) -> None:
        """Store the underlying process failure description."""
        super().__init__(f"pnpm install failed: {detail}")


class InstallFailedError(InstallError):
    """Raised for non-zero exit codes when ``fail_on_error`` is requested."""

    def __init__(self, exit_code: int) -> None:
        """Record the exit code reported by ``pnpm install``."""
        self.exit_code = exit_code
        super().__init__(f"pnpm install exited with status {exit_code}")


class InstallResult(msgspec.Struct, frozen=True, kw_only=True):
    """Outcome of a completed ``pnpm install`` run."""

    exit_code: int

    @property
    def succeeded(self) -> bool:
        """Return ``True`` when the process exited with status zero."""
        return self.exit_code == 0


class OutputSink(typ.Protocol):
    """Receives output emitted by the install process."""

    def stdout(self, line: str) -> None:
        """Handle a line written to standard output."""

    def stderr(self, line: str) -> None:
        """Handle a line written to standard error."""


class LoggingSink:
    """Forward process output to a :class:`logging.Logger`."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Log to ``logger``, or to this module's logger when omitted."""
        self._logger = LOGGER if logger is None else logger

    def stdout(self, line: str) -> None:
        """Log ``line`` at INFO."""
        self._logger.info("%s", line)

    def stderr(self, line: str) -> None:
        """Log ``line`` at ERROR."""
        self._logger.error("%s", line)


def _ensure_command() -> BoundCommand:
    """Return the ``pnpm install`` command object."""
    try:
        pnpm = local["pnpm"]
    except CommandNotFound as exc:
        raise PnpmExecutableNotFoundError from exc
    return pnpm["install"]


def _run_streaming(command: BoundCommand, cwd: Path, sink: OutputSink) -> int:
    """Run ``command`` in ``cwd`` forwarding each output line to ``sink``."""
    try:
        proc = command.popen(cwd=str(cwd))
    except OSError as exc:
        raise InstallProcessError(str(exc)) from exc
    lines = iter_lines(proc, retcode=None, mode=BY_TYPE)
    try:
        for stream, line in lines:
            if stream == _STDOUT:
                sink.stdout(line)
            else:
                sink.stderr(line)
    except (OSError, UnicodeDecodeError) as exc:
        raise InstallProcessError(str(exc)) from exc
    finally:
        lines.close()
        # The process must not outlive an aborted read.
        if proc.poll() is None:
            proc.kill()
        proc.wait()
    return proc.returncode


async def install(
    workspace_root: Path | str | None = None,
    *,
    sink: OutputSink | None = None,
    fail_on_error: bool = False,
) -> InstallResult:
    """Run ``pnpm install`` in ``workspace_root`` and report its exit code.

    Output is streamed to ``sink`` (a :class:`LoggingSink` by default) while
    the process runs. A non-zero exit code is only logged unless
    ``fail_on_error`` is set, in which case :class:`InstallFailedError` is
    raised. There is no timeout and the process cannot be cancelled once it
    has started.
    """
    root_path = normalise_workspace_root(workspace_root)
    command = _ensure_command()
    output = LoggingSink() if sink is None else sink
    exit_code = await asyncio.to_thread(_run_streaming, command, root_path, output)
    LOGGER.debug("pnpm install finished with code %s", exit_code)
    if fail_on_error and exit_code != 0:
        raise InstallFailedError(exit_code)
    return InstallResult(exit_code=exit_code)
