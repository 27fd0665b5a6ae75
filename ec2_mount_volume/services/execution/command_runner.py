"""Command Runner - spawns one child process and forwards its output."""

import asyncio
import codecs
import logging
import sys
import time
from typing import Optional, Sequence, TextIO

from ...core.exceptions import CommandExecutionError

logger = logging.getLogger(__name__)

FORWARD_CHUNK_SIZE = 65536


class CommandRunner:
    """Runs commands with asyncio subprocesses, forwarding stdout/stderr."""

    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self._stdout = stdout
        self._stderr = stderr

    async def run(self, command: Sequence[str]) -> None:
        """Run `command` to completion; raise CommandExecutionError unless it exits 0."""
        logger.info(f"Executing: {' '.join(command)}")
        start_time = time.monotonic()

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(f"Could not start {command[0]}: {e}")
            raise CommandExecutionError(command, error=str(e)) from e

        try:
            await asyncio.gather(
                self._forward(process.stdout, self._stdout or sys.stdout),
                self._forward(process.stderr, self._stderr or sys.stderr),
            )
            return_code = await process.wait()
        except asyncio.CancelledError:
            await self._kill(process)
            raise
        except Exception as e:
            await self._kill(process)
            logger.error(f"Could not forward output of {command[0]}: {e}")
            raise CommandExecutionError(command, error=str(e)) from e

        duration = time.monotonic() - start_time
        if return_code != 0:
            logger.error(
                f"Command failed (code {return_code}) in {duration:.2f}s: {' '.join(command)}"
            )
            raise CommandExecutionError(command, return_code=return_code)

        logger.debug(f"Command completed in {duration:.2f}s: {' '.join(command)}")

    async def _forward(self, reader: asyncio.StreamReader, target: TextIO) -> None:
        # Chunked reads: a child may write arbitrarily long runs without a newline
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            chunk = await reader.read(FORWARD_CHUNK_SIZE)
            if not chunk:
                break
            target.write(decoder.decode(chunk))
            target.flush()
        tail = decoder.decode(b"", final=True)
        if tail:
            target.write(tail)
            target.flush()

    async def _kill(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        logger.warning(f"Killing child process {process.pid}")
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()
