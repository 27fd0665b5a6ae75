import logging
from typing import Iterable

from ...models import MountPlan, PlanEntry, Volume
from ..device.device_resolver import DeviceResolver

logger = logging.getLogger(__name__)


class MountPlanBuilder:
    """Turns tagged volumes into an ordered mount plan."""

    def __init__(
        self,
        resolver: DeviceResolver,
        tag_name: str = "Mount",
        partition_suffix: str = "p1",
        fs_type: str = "ext4",
        mount_options: str = "defaults",
    ):
        self.resolver = resolver
        self.tag_name = tag_name
        self.partition_suffix = partition_suffix
        self.fs_type = fs_type
        self.mount_options = mount_options

    def build(self, volumes: Iterable[Volume]) -> MountPlan:
        """
        Build the plan in volume order.

        Volumes without the tag are skipped. Tagged volumes without a device
        are skipped too; the count check reports them in aggregate.
        """
        entries = []

        for volume in volumes:
            mount_point = volume.tag_value(self.tag_name)
            if mount_point is None:
                logger.debug(f"Skipping {volume.volume_id}: no '{self.tag_name}' tag")
                continue

            lookup = self.resolver.resolve(volume.volume_id)
            if not lookup.is_found:
                logger.warning(
                    f"No device for {volume.volume_id} (mount point {mount_point}): "
                    f"{lookup.status.value} at {lookup.symlink_path}"
                )
                continue

            entries.append(
                PlanEntry(
                    volume_id=volume.volume_id,
                    device_path=lookup.device_path,
                    partition_suffix=self.partition_suffix,
                    mount_point=mount_point,
                    fs_type=self.fs_type,
                    mount_options=self.mount_options,
                )
            )
            logger.info(
                f"Planned {volume.volume_id}: {lookup.device_path}{self.partition_suffix} -> {mount_point}"
            )

        return MountPlan(entries=entries)
