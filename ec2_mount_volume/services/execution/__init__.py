"""
Execution package: the dry-run/force driver and the child process runner.
"""

from .command_runner import CommandRunner
from .execution_driver import ExecutionDriver

__all__ = ["CommandRunner", "ExecutionDriver"]
