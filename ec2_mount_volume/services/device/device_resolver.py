"""
Device Resolver - maps EBS volume ids to their current NVMe block devices.

The kernel names NVMe devices in attach order, which changes between boots.
udev exposes a stable symlink per volume under /dev/disk/by-id, e.g.

    nvme-Amazon_Elastic_Block_Store_vol0fab1d5e3f72a5e23 -> ../../nvme2n1
"""

import logging
import os
import stat
from pathlib import Path

from ...core.exceptions import DeviceResolutionError
from ...models import DeviceLookup

logger = logging.getLogger(__name__)

SYMLINK_PREFIX = "nvme-Amazon_Elastic_Block_Store_vol"
VOLUME_ID_PREFIX = "vol-"


class DeviceResolver:
    """Resolves volume ids through the by-id symlink namespace."""

    def __init__(self, symlink_dir: str = "/dev/disk/by-id", device_prefix: str = "/dev"):
        self.symlink_dir = Path(symlink_dir)
        self.device_prefix = device_prefix.rstrip("/") or "/"

    def symlink_name(self, volume_id: str) -> str:
        return SYMLINK_PREFIX + volume_id.removeprefix(VOLUME_ID_PREFIX)

    def resolve(self, volume_id: str) -> DeviceLookup:
        """
        Look up the device for `volume_id`.

        Returns NOT_FOUND when no symlink exists and NOT_A_SYMLINK when the
        path exists but is something else. Raises DeviceResolutionError when
        the path cannot be inspected or resolves outside the device prefix.
        """
        symlink_path = self.symlink_dir / self.symlink_name(volume_id)

        try:
            st = os.lstat(symlink_path)
        except FileNotFoundError:
            logger.debug(f"No by-id symlink for {volume_id}: {symlink_path}")
            return DeviceLookup.not_found(str(symlink_path))
        except OSError as e:
            raise DeviceResolutionError(str(symlink_path), f"error getting stat: {e}") from e

        if not stat.S_ISLNK(st.st_mode):
            logger.debug(f"by-id path for {volume_id} is not a symlink: {symlink_path}")
            return DeviceLookup.not_a_symlink(str(symlink_path))

        # Follows chained links, e.g. by-id -> ../../nvme2n1
        try:
            resolved = str(symlink_path.resolve(strict=True))
        except (OSError, RuntimeError) as e:
            raise DeviceResolutionError(
                str(symlink_path), f"error reading target of symlink: {e}"
            ) from e

        if not self._is_device_path(resolved):
            raise DeviceResolutionError(
                str(symlink_path), f"resolved symlink was unexpected: {resolved!r}"
            )

        logger.debug(f"Resolved {volume_id}: {symlink_path} -> {resolved}")
        return DeviceLookup.found(str(symlink_path), resolved)

    def _is_device_path(self, path: str) -> bool:
        if self.device_prefix == "/":
            return path.startswith("/")
        return path == self.device_prefix or path.startswith(self.device_prefix + "/")
