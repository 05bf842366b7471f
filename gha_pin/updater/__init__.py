from .file_updater import UpdateOutcome, apply_updates, rewrite_line
from .orchestrator import UpdateReport, normalize_target, update_workflows
from .planner import PlanReport, plan_updates

__all__ = [
    "UpdateOutcome",
    "apply_updates",
    "rewrite_line",
    "UpdateReport",
    "normalize_target",
    "update_workflows",
    "PlanReport",
    "plan_updates",
]
