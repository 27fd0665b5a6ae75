"""
Execution Driver - prints or runs the fsck and mount commands of a plan.

Every fsck command finishes before the first mount command starts. The whole
sequence shares one deadline.
"""

import asyncio
import logging
import sys
from typing import List, Optional, Sequence, TextIO

from ...core.exceptions import ExecutionTimeoutError
from .command_runner import CommandRunner

logger = logging.getLogger(__name__)

DRY_RUN_COMPLETE_MESSAGE = "Dry run complete. Run with --force to execute the commands."


class ExecutionDriver:
    """Applies the dry-run/force policy to a plan's command lists."""

    def __init__(
        self,
        runner: CommandRunner,
        dry_run: bool = True,
        timeout: float = 60,
        out: Optional[TextIO] = None,
    ):
        self.runner = runner
        self.dry_run = dry_run
        self.timeout = timeout
        self._out = out

    async def run(
        self,
        fsck_commands: Sequence[List[str]],
        mount_commands: Sequence[List[str]],
    ) -> None:
        mode = "dry run" if self.dry_run else "forced"
        logger.info(
            f"Executing plan ({mode}): {len(fsck_commands)} fsck, "
            f"{len(mount_commands)} mount, timeout {self.timeout}s"
        )
        try:
            await asyncio.wait_for(
                self._run_sequence(fsck_commands, mount_commands), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Plan execution timed out after {self.timeout}s")
            raise ExecutionTimeoutError(self.timeout) from e

    async def _run_sequence(
        self,
        fsck_commands: Sequence[List[str]],
        mount_commands: Sequence[List[str]],
    ) -> None:
        for command in fsck_commands:
            await self._apply(command)

        for command in mount_commands:
            await self._apply(command)

        if self.dry_run:
            self._print(DRY_RUN_COMPLETE_MESSAGE)

    async def _apply(self, command: List[str]) -> None:
        if self.dry_run:
            self._print(" ".join(command))
            return
        await self.runner.run(command)

    def _print(self, line: str) -> None:
        out = self._out or sys.stdout
        out.write(line + "\n")
        out.flush()
