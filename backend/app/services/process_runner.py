"""
External process execution.

Runs ffprobe/ffmpeg as child processes and captures their output. The
pipeline depends only on the ProcessRunner protocol, so tests can pass a
fake runner that returns canned output without invoking real binaries.
"""

import asyncio
import logging
import shutil
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from app.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """
    Outcome of a finished child process.

    Attributes:
        args: Command line that was executed
        returncode: Exit status
        stdout: Captured standard output (decoded)
        stderr: Captured standard error (decoded)
    """

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """True if the process exited with status 0."""
        return self.returncode == 0


@runtime_checkable
class ProcessRunner(Protocol):
    """
    Protocol for blocking command execution.

    Implementations run the command to completion and return its exit
    status together with captured stdout/stderr. A non-zero exit is
    reported through ProcessResult, not raised.
    """

    async def run(self, args: list[str]) -> ProcessResult:
        """
        Run a command and wait for it to exit.

        Args:
            args: Program followed by its arguments

        Returns:
            ProcessResult with exit status and captured output

        Raises:
            FileNotFoundError: If the program does not exist
        """
        ...


class AsyncProcessRunner:
    """
    ProcessRunner backed by asyncio subprocesses.

    The calling task suspends until the child exits. If the task is
    cancelled while waiting, the child is killed and reaped before the
    cancellation propagates so it cannot keep writing to disk.

    Example:
        runner = AsyncProcessRunner()
        result = await runner.run(["ffprobe", "-version"])
        if not result.ok:
            print(result.stderr)
    """

    async def run(self, args: list[str]) -> ProcessResult:
        logger.debug(f"Running: {' '.join(args)}")

        proc = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                logger.warning(f"Cancelled, killing {args[0]} (pid {proc.pid})")
                proc.kill()
                await proc.wait()
            raise

        return ProcessResult(
            args=list(args),
            returncode=proc.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )


def check_tools(settings: Settings) -> dict[str, bool]:
    """
    Check that the configured media tools are on PATH.

    Args:
        settings: Application settings

    Returns:
        Dict mapping tool binary name to availability
    """
    return {
        binary: shutil.which(binary) is not None
        for binary in (settings.ffprobe_bin, settings.ffmpeg_bin)
    }
