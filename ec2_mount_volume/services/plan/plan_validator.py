import logging

from ...core.exceptions import DeviceCountMismatchError
from ...models import MountPlan

logger = logging.getLogger(__name__)


class PlanValidator:
    """Fails closed when the plan does not match the declared device count."""

    def __init__(self, expected_count: int):
        self.expected_count = expected_count

    def validate(self, plan: MountPlan) -> None:
        actual = len(plan)
        if actual != self.expected_count:
            logger.info(
                f"Device count mismatch: expected {self.expected_count}, detected {actual}"
            )
            raise DeviceCountMismatchError(self.expected_count, actual)
