# ec2_mount_volume/core/exceptions.py

from typing import Optional, Sequence


class MountVolumeError(Exception):
    """Base exception for every error raised by ec2-mount-volume."""


class TransientError(MountVolumeError):
    """Raised for failures that are expected to clear up on retry."""


class ConfigurationError(MountVolumeError):
    """Raised when settings or flags are malformed."""


class FatalError(MountVolumeError):
    """Base exception for failures that terminate the run."""


class MetadataFetchError(FatalError):
    """Raised when the attached volume list could not be fetched after all retries."""
    def __init__(self, attempts: int, last_error: str):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"failed to get volumes metadata after {attempts} tries: {last_error}"
        )


class DeviceResolutionError(FatalError):
    """Raised when a by-id symlink cannot be resolved to a plausible device."""
    def __init__(self, symlink_path: str, reason: str):
        self.symlink_path = symlink_path
        self.reason = reason
        super().__init__(f"Device resolution failed for {symlink_path!r}: {reason}")


class DeviceCountMismatchError(FatalError):
    """Raised when the mount plan size differs from the expected device count."""
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Canceled. Expected {expected} devices to mount but detected {actual}."
        )


class CommandExecutionError(FatalError):
    """Raised when a child command cannot be spawned or exits non-zero."""
    def __init__(
        self,
        command: Sequence[str],
        return_code: Optional[int] = None,
        error: Optional[str] = None,
    ):
        self.command = list(command)
        self.return_code = return_code
        self.error = error
        detail = error if error is not None else f"exit status {return_code}"
        super().__init__(f"Command '{' '.join(self.command)}' failed: {detail}")


class ExecutionTimeoutError(FatalError):
    """Raised when the command execution phase exceeds its deadline."""
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Command execution exceeded the {timeout}s deadline")
