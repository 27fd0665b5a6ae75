"""
Pytest configuration and shared fixtures.
"""

import os
from pathlib import Path

import pytest

from ec2_mount_volume.models import Tag, Volume
from ec2_mount_volume.services.device.device_resolver import DeviceResolver


class FakeDeviceNamespace:
    """A by-id symlink directory and a device directory under tmp_path."""

    def __init__(self, root: Path):
        self.root = root
        self.dev_dir = root / "dev"
        self.by_id_dir = self.dev_dir / "disk" / "by-id"
        self.by_id_dir.mkdir(parents=True)

    def symlink_path(self, volume_id: str) -> Path:
        suffix = volume_id.removeprefix("vol-")
        return self.by_id_dir / f"nvme-Amazon_Elastic_Block_Store_vol{suffix}"

    def attach(self, volume_id: str, device_name: str) -> Path:
        """Create dev/<device_name> and a relative by-id symlink to it, like udev does."""
        device = self.dev_dir / device_name
        device.touch()
        os.symlink(os.path.join("..", "..", device_name), self.symlink_path(volume_id))
        return device

    def resolver(self) -> DeviceResolver:
        return DeviceResolver(symlink_dir=str(self.by_id_dir), device_prefix=str(self.dev_dir))


@pytest.fixture
def device_namespace(tmp_path):
    # resolve() so symlinked temp dirs (e.g. /private/var on macOS) compare equal
    return FakeDeviceNamespace(tmp_path.resolve())


@pytest.fixture
def data_and_root_volumes():
    """Two volumes tagged Mount=/data and Mount=/, in API order."""
    return [
        Volume(volume_id="vol-0fab1d5e3f72a5e23", tags=[Tag(key="Mount", value="/data")]),
        Volume(
            volume_id="vol-0123456789abcdef0",
            tags=[Tag(key="Name", value="root"), Tag(key="Mount", value="/")],
        ),
    ]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from EC2_MOUNT_VOLUME_* variables."""
    for name in list(os.environ):
        if name.startswith("EC2_MOUNT_VOLUME_"):
            monkeypatch.delenv(name)
