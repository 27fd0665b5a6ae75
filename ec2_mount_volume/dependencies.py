from typing import Optional, TextIO

from pydantic import ValidationError

from .config import Settings
from .core.exceptions import ConfigurationError
from .services.device.device_resolver import DeviceResolver
from .services.execution.command_runner import CommandRunner
from .services.execution.execution_driver import ExecutionDriver
from .services.metadata.instance_identity import InstanceIdentityProvider
from .services.metadata.volume_fetcher import VolumeMetadataFetcher
from .services.mount_volume_service import MountVolumeService
from .services.plan.plan_builder import MountPlanBuilder
from .services.plan.plan_validator import PlanValidator


def load_settings(**overrides) -> Settings:
    """Settings from the environment and settings.env; keyword overrides win."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def get_device_resolver(settings: Settings) -> DeviceResolver:
    return DeviceResolver(
        symlink_dir=settings.symlink_dir, device_prefix=settings.device_prefix
    )


def get_volume_fetcher(
    settings: Settings, err: Optional[TextIO] = None
) -> VolumeMetadataFetcher:
    return VolumeMetadataFetcher(
        identity_provider=InstanceIdentityProvider(
            metadata_service_num_attempts=settings.metadata_service_num_attempts
        ),
        max_attempts=settings.max_fetch_attempts,
        backoff_min_seconds=settings.backoff_min_seconds,
        backoff_max_seconds=settings.backoff_max_seconds,
        backoff_factor=settings.backoff_factor,
        err=err,
    )


def get_plan_builder(settings: Settings) -> MountPlanBuilder:
    return MountPlanBuilder(
        resolver=get_device_resolver(settings),
        tag_name=settings.tag,
        partition_suffix=settings.part_suffix,
        fs_type=settings.fs_type,
        mount_options=settings.mount_opt,
    )


def get_execution_driver(
    settings: Settings, out: Optional[TextIO] = None, err: Optional[TextIO] = None
) -> ExecutionDriver:
    return ExecutionDriver(
        runner=CommandRunner(stdout=out, stderr=err),
        dry_run=settings.dry_run,
        timeout=settings.timeout,
        out=out,
    )


def get_mount_volume_service(
    settings: Settings, out: Optional[TextIO] = None, err: Optional[TextIO] = None
) -> MountVolumeService:
    if settings.device_num is None:
        raise ConfigurationError("device_num is required")

    return MountVolumeService(
        fetcher=get_volume_fetcher(settings, err=err),
        builder=get_plan_builder(settings),
        validator=PlanValidator(settings.device_num),
        driver=get_execution_driver(settings, out=out, err=err),
    )
