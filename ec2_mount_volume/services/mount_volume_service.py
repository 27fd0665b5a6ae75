"""Mount Volume Service - fetch, plan, validate and execute, in that order."""

import logging

from ..models import MountPlan
from .execution.execution_driver import ExecutionDriver
from .metadata.volume_fetcher import VolumeMetadataFetcher
from .plan.plan_builder import MountPlanBuilder
from .plan.plan_validator import PlanValidator

logger = logging.getLogger(__name__)


class MountVolumeService:
    """Orchestrates one stateless mount run."""

    def __init__(
        self,
        fetcher: VolumeMetadataFetcher,
        builder: MountPlanBuilder,
        validator: PlanValidator,
        driver: ExecutionDriver,
    ):
        self._fetcher = fetcher
        self._builder = builder
        self._validator = validator
        self._driver = driver

    async def run(self) -> MountPlan:
        volumes = await self._fetcher.fetch()
        logger.info(f"Found {len(volumes)} volumes attached to this instance")

        plan = self._builder.build(volumes)
        logger.info(f"Mount plan has {len(plan)} entries")

        # Nothing is printed or executed unless the count matches
        self._validator.validate(plan)

        await self._driver.run(plan.fsck_commands, plan.mount_commands)
        return plan
