from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Tag(BaseModel):
    """A single EBS resource tag."""

    key: str = Field(..., description="Tag key, matched exactly")
    value: str = Field(default="", description="Tag value, empty means unset")

    model_config = ConfigDict(frozen=True)


class Volume(BaseModel):
    """
    Snapshot of one EBS volume attached to this instance.

    Built from a DescribeVolumes response item. Tags keep the order the API
    returned them in, and keys may repeat.
    """

    volume_id: str = Field(
        ..., description="Provider-assigned stable identifier, e.g. vol-0fab1d5e3f72a5e23"
    )
    tags: List[Tag] = Field(default_factory=list)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "volume_id": "vol-0fab1d5e3f72a5e23",
                "tags": [{"key": "Mount", "value": "/data"}],
            }
        },
    )

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Volume":
        return cls(
            volume_id=data["VolumeId"],
            tags=[
                Tag(key=tag.get("Key", ""), value=tag.get("Value", ""))
                for tag in data.get("Tags") or []
            ],
        )

    def tag_value(self, name: str) -> Optional[str]:
        """First non-empty value of the tag named `name`, or None."""
        for tag in self.tags:
            if tag.key == name and tag.value != "":
                return tag.value
        return None


class DeviceLookupStatus(str, Enum):
    """Outcome of looking up a volume in the by-id symlink namespace"""

    FOUND = "Found"  # Symlink resolved to a device node
    NOT_FOUND = "NotFound"  # No symlink for this volume (yet)
    NOT_A_SYMLINK = "NotASymlink"  # Path exists but is not a symlink


class DeviceLookup(BaseModel):
    """Tagged result of resolving a volume id to its kernel device."""

    status: DeviceLookupStatus
    symlink_path: str = Field(..., description="by-id path that was inspected")
    device_path: Optional[str] = Field(
        default=None, description="Absolute device path, set only when FOUND"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def found(cls, symlink_path: str, device_path: str) -> "DeviceLookup":
        return cls(
            status=DeviceLookupStatus.FOUND,
            symlink_path=symlink_path,
            device_path=device_path,
        )

    @classmethod
    def not_found(cls, symlink_path: str) -> "DeviceLookup":
        return cls(status=DeviceLookupStatus.NOT_FOUND, symlink_path=symlink_path)

    @classmethod
    def not_a_symlink(cls, symlink_path: str) -> "DeviceLookup":
        return cls(status=DeviceLookupStatus.NOT_A_SYMLINK, symlink_path=symlink_path)

    @property
    def is_found(self) -> bool:
        return self.status == DeviceLookupStatus.FOUND


class PlanEntry(BaseModel):
    """
    One volume's resolved mount unit.

    Each entry yields one fsck command and one mount command. The argument
    order of both is fixed.
    """

    volume_id: str
    device_path: str = Field(..., description="Resolved kernel device, e.g. /dev/nvme1n1")
    partition_suffix: str = Field(default="", description="Appended to device_path")
    mount_point: str = Field(..., description="Target directory from the volume tag")
    fs_type: str
    mount_options: str

    model_config = ConfigDict(frozen=True)

    @property
    def partition_path(self) -> str:
        return self.device_path + self.partition_suffix

    @property
    def fsck_command(self) -> List[str]:
        # -M: error if already mounted; -y: attempt to repair issues; -V: verbose
        return ["fsck", "-M", "-y", "-V", self.partition_path]

    @property
    def mount_command(self) -> List[str]:
        return [
            "mount",
            "-o",
            self.mount_options,
            "-t",
            self.fs_type,
            self.partition_path,
            self.mount_point,
        ]


class MountPlan(BaseModel):
    """Ordered plan entries, in the order the volumes were fetched."""

    entries: List[PlanEntry] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def fsck_commands(self) -> List[List[str]]:
        return [entry.fsck_command for entry in self.entries]

    @property
    def mount_commands(self) -> List[List[str]]:
        return [entry.mount_command for entry in self.entries]
