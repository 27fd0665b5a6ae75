from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "EC2_MOUNT_VOLUME_"


class Settings(BaseSettings):
    # Mount plan
    device_num: Optional[int] = Field(
        default=None, ge=0, description="Expected number of volumes"
    )
    force: bool = Field(
        default=False, description="Disable the default dry-run mode"
    )
    fs_type: str = Field(default="ext4", min_length=1, description="Filesystem type")
    mount_opt: str = Field(
        default="defaults", min_length=1, description="'mount' option list"
    )
    part_suffix: str = Field(
        default="p1",
        description="Suffix appended to device paths to create partition paths",
    )
    tag: str = Field(
        default="Mount",
        min_length=1,
        description="Name of the EBS volume resource tag specifying mount points",
    )
    timeout: int = Field(
        default=60,
        ge=1,
        description="Number of seconds to wait for all volumes to be mounted before cancellation",
    )

    # Device namespace (by-id symlinks -> /dev/nvmeXnY)
    symlink_dir: str = "/dev/disk/by-id"
    device_prefix: str = "/dev"

    # Metadata fetch retry
    max_fetch_attempts: int = Field(default=10, ge=1)
    backoff_min_seconds: float = Field(default=0.1, gt=0)
    backoff_max_seconds: float = Field(default=10.0, gt=0)
    backoff_factor: float = Field(default=2.0, ge=1.0)
    metadata_service_num_attempts: int = Field(default=3, ge=1)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_file_path: Optional[str] = None
    log_retention_days: int = 7

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX, env_file="settings.env", extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_case_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def dry_run(self) -> bool:
        return not self.force

    @property
    def log_directory(self) -> Optional[Path]:
        """Directory of the optional log file."""
        if not self.log_file_path:
            return None
        return Path(self.log_file_path).parent
