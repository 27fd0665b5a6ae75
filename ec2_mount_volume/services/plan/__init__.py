from .plan_builder import MountPlanBuilder
from .plan_validator import PlanValidator

__all__ = ["MountPlanBuilder", "PlanValidator"]
