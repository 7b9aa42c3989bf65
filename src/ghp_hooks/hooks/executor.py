"""Shell command execution with a timeout for event hooks."""

from __future__ import annotations

import asyncio
import os
import signal
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

DEFAULT_SHELL = "/bin/sh"
KILL_GRACE_SECONDS = 2.0
"""How long a timed-out process may take to exit after SIGTERM before SIGKILL."""


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of command execution."""

    stdout: str
    stderr: str
    exit_code: int | None
    """None when the process was killed by a signal or could not be spawned."""
    timed_out: bool = False


def _signal_group(proc: asyncio.subprocess.Process, sig: signal.Signals) -> None:
    # The shell runs in its own session, so its children share its process group.
    try:
        os.killpg(proc.pid, sig)
    except (ProcessLookupError, PermissionError):
        pass


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace").strip()


async def run_command(
    command: str,
    timeout_ms: int,
    *,
    cwd: str | Path | None = None,
    shell: str = DEFAULT_SHELL,
) -> CommandResult:
    """Run ``command`` through a POSIX shell and capture its output.

    Process completion races a timer of ``timeout_ms``. Whichever finishes first
    wins: the timer is cancelled when the process exits, and the process group is
    terminated when the timer fires. Spawn failures are reported in the result
    rather than raised.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            shell,
            "-c",
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd is not None else None,
            start_new_session=True,
        )
    except (OSError, ValueError) as e:
        # ValueError: arguments with embedded NUL bytes
        logger.warning("Failed to spawn hook command: {error}", error=e)
        return CommandResult(stdout="", stderr=str(e), exit_code=None, timed_out=False)

    communicate = asyncio.create_task(proc.communicate())
    timer = asyncio.create_task(asyncio.sleep(timeout_ms / 1000))
    timed_out = False

    try:
        done, _ = await asyncio.wait({communicate, timer}, return_when=asyncio.FIRST_COMPLETED)
        if communicate not in done:
            timed_out = True
            logger.debug(
                "Command timed out after {timeout}ms, terminating pid {pid}",
                timeout=timeout_ms,
                pid=proc.pid,
            )
            _signal_group(proc, signal.SIGTERM)
            try:
                await asyncio.wait_for(asyncio.shield(communicate), KILL_GRACE_SECONDS)
            except TimeoutError:
                logger.warning("Command ignored SIGTERM, killing pid {pid}", pid=proc.pid)
                _signal_group(proc, signal.SIGKILL)
        stdout, stderr = await communicate
    finally:
        timer.cancel()
        if not communicate.done():
            communicate.cancel()
            _signal_group(proc, signal.SIGKILL)

    returncode = proc.returncode
    return CommandResult(
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        exit_code=returncode if returncode is not None and returncode >= 0 else None,
        timed_out=timed_out,
    )
