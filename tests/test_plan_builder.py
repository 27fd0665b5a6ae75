"""
Tests for MountPlanBuilder and PlanValidator.
"""

import os

import pytest

from ec2_mount_volume.core.exceptions import DeviceCountMismatchError, DeviceResolutionError
from ec2_mount_volume.models import MountPlan, PlanEntry, Tag, Volume
from ec2_mount_volume.services.plan.plan_builder import MountPlanBuilder
from ec2_mount_volume.services.plan.plan_validator import PlanValidator


class TestMountPlanBuilder:
    @pytest.fixture
    def builder(self, device_namespace):
        return MountPlanBuilder(resolver=device_namespace.resolver())

    def test_builds_entries_in_volume_order(self, builder, device_namespace, data_and_root_volumes):
        data_device = device_namespace.attach("vol-0fab1d5e3f72a5e23", "nvme1n1")
        root_device = device_namespace.attach("vol-0123456789abcdef0", "nvme0n1")

        plan = builder.build(data_and_root_volumes)

        assert [entry.mount_point for entry in plan.entries] == ["/data", "/"]
        assert plan.fsck_commands == [
            ["fsck", "-M", "-y", "-V", f"{data_device}p1"],
            ["fsck", "-M", "-y", "-V", f"{root_device}p1"],
        ]
        assert plan.mount_commands == [
            ["mount", "-o", "defaults", "-t", "ext4", f"{data_device}p1", "/data"],
            ["mount", "-o", "defaults", "-t", "ext4", f"{root_device}p1", "/"],
        ]

    def test_uses_configured_parameters(self, device_namespace):
        device = device_namespace.attach("vol-0abc", "nvme3n1")
        builder = MountPlanBuilder(
            resolver=device_namespace.resolver(),
            tag_name="mount-point",
            partition_suffix="",
            fs_type="xfs",
            mount_options="noatime",
        )

        plan = builder.build([Volume(volume_id="vol-0abc", tags=[Tag(key="mount-point", value="/srv")])])

        assert plan.mount_commands == [["mount", "-o", "noatime", "-t", "xfs", str(device), "/srv"]]

    def test_untagged_volumes_are_skipped(self, builder, device_namespace):
        device_namespace.attach("vol-0abc", "nvme1n1")
        volumes = [
            Volume(volume_id="vol-0abc", tags=[Tag(key="Name", value="scratch")]),
            Volume(volume_id="vol-0def", tags=[Tag(key="Mount", value="")]),
        ]

        assert len(builder.build(volumes)) == 0

    def test_tagged_volume_without_device_is_dropped(self, builder, device_namespace, data_and_root_volumes):
        device_namespace.attach("vol-0fab1d5e3f72a5e23", "nvme1n1")

        plan = builder.build(data_and_root_volumes)

        assert [entry.volume_id for entry in plan.entries] == ["vol-0fab1d5e3f72a5e23"]

    def test_tagged_volume_with_non_symlink_is_dropped(self, builder, device_namespace):
        device_namespace.symlink_path("vol-0abc").write_text("")

        plan = builder.build([Volume(volume_id="vol-0abc", tags=[Tag(key="Mount", value="/data")])])

        assert len(plan) == 0

    def test_resolution_errors_propagate(self, builder, device_namespace):
        os.symlink("/nonexistent/nvme1n1", device_namespace.symlink_path("vol-0abc"))

        with pytest.raises(DeviceResolutionError):
            builder.build([Volume(volume_id="vol-0abc", tags=[Tag(key="Mount", value="/data")])])

    def test_resolver_not_called_for_untagged_volumes(self, builder, device_namespace):
        # A dangling link would be fatal if it were resolved
        os.symlink("/nonexistent/nvme1n1", device_namespace.symlink_path("vol-0abc"))

        plan = builder.build([Volume(volume_id="vol-0abc", tags=[])])

        assert len(plan) == 0


class TestPlanValidator:
    @staticmethod
    def plan_of(size):
        return MountPlan(
            entries=[
                PlanEntry(
                    volume_id=f"vol-{i}",
                    device_path=f"/dev/nvme{i}n1",
                    mount_point=f"/mnt/{i}",
                    fs_type="ext4",
                    mount_options="defaults",
                )
                for i in range(size)
            ]
        )

    def test_matching_count_passes(self):
        PlanValidator(2).validate(self.plan_of(2))

    def test_empty_plan_with_zero_expected_passes(self):
        PlanValidator(0).validate(self.plan_of(0))

    @pytest.mark.parametrize("expected,actual", [(1, 0), (3, 2), (2, 3), (0, 1)])
    def test_mismatch_aborts(self, expected, actual):
        with pytest.raises(DeviceCountMismatchError) as exc_info:
            PlanValidator(expected).validate(self.plan_of(actual))

        assert exc_info.value.expected == expected
        assert exc_info.value.actual == actual
        assert str(exc_info.value) == (
            f"Canceled. Expected {expected} devices to mount but detected {actual}."
        )
