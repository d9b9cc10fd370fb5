"""Execution of external engine commands."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
from dataclasses import dataclass
from enum import Enum

from paulenv.engines.errors import CommandError, CommandTimeout


logger = logging.getLogger(__name__)

# Time given to a terminated process group before it is killed
TERMINATE_GRACE_PERIOD = 5.0


class Stream(str, Enum):
    """How a standard stream of the child process is wired."""
    CAPTURE = "capture"
    INHERIT = "inherit"
    DISCARD = "discard"


@dataclass
class CommandResult:
    """Outcome of a finished command."""
    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""


def _wire(stream: Stream) -> int | None:
    if stream == Stream.CAPTURE:
        return asyncio.subprocess.PIPE
    if stream == Stream.DISCARD:
        return asyncio.subprocess.DEVNULL
    return None


async def _terminate(process: asyncio.subprocess.Process, group: bool) -> None:
    """Stop a process (and its process group when it owns one)."""
    if process.returncode is not None:
        return
    try:
        if group:
            os.killpg(process.pid, signal.SIGTERM)
        else:
            process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=TERMINATE_GRACE_PERIOD)
        except asyncio.TimeoutError:
            if group:
                os.killpg(process.pid, signal.SIGKILL)
            else:
                process.kill()
            await process.wait()
    except ProcessLookupError:
        pass


async def run_command(
    args: list[str],
    *,
    env: dict[str, str] | None = None,
    stdin: Stream = Stream.DISCARD,
    stdout: Stream = Stream.CAPTURE,
    stderr: Stream = Stream.CAPTURE,
    timeout: float | None = None,
) -> CommandResult:
    """Run an external command and wait for it to exit.

    Args:
        args: Program followed by its arguments
        env: Variables overlaid on the current process environment
        stdin: Wiring of the child's standard input (CAPTURE is treated as DISCARD)
        stdout: Wiring of the child's standard output
        stderr: Wiring of the child's standard error
        timeout: Deadline in seconds, None for no deadline

    Returns:
        CommandResult with the captured output (empty for streams not captured)

    Raises:
        CommandError: If the program cannot be started or exits non-zero
        CommandTimeout: If the deadline expires; the process is terminated

    Cancelling the awaiting task terminates the process before the
    cancellation propagates. Commands that do not inherit stdin run in
    their own process group so that termination reaches their children;
    interactive commands stay in the foreground group of the terminal.
    """
    interactive = stdin == Stream.INHERIT
    child_env = None
    if env:
        child_env = {**os.environ, **env}

    logger.debug(f"Running: {' '.join(args)}", extra={"argv": list(args)})

    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdin=None if interactive else asyncio.subprocess.DEVNULL,
            stdout=_wire(stdout),
            stderr=_wire(stderr),
            env=child_env,
            start_new_session=not interactive,
        )
    except OSError as e:
        raise CommandError(args, None, reason=str(e)) from e

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"Command timed out after {timeout}s: {' '.join(args)}", extra={"argv": list(args)})
        await _terminate(process, group=not interactive)
        raise CommandTimeout(args, timeout)
    except asyncio.CancelledError:
        logger.debug(f"Cancelled: {' '.join(args)}")
        await _terminate(process, group=not interactive)
        raise

    result = CommandResult(
        args=list(args),
        returncode=process.returncode or 0,
        stdout=out.decode(errors="replace") if out is not None else "",
        stderr=err.decode(errors="replace") if err is not None else "",
    )
    if result.returncode != 0:
        raise CommandError(args, result.returncode, result.stdout, result.stderr)
    return result
