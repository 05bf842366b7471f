"""
JSON reporter: outputs check results as structured JSON for programmatic use.
"""

import json
import logging

from gha_pin.parser.workflow_parser import WorkflowActions
from gha_pin.updater.planner import PlanReport

logger = logging.getLogger(__name__)


def report_json(actions: WorkflowActions, plan: PlanReport) -> str:
    """
    Format check results as a JSON string.

    Returns:
        A JSON string with every reference and the run totals.
    """
    errors = {id(f.reference): str(f.error) for f in plan.failures}
    data = {
        "total": plan.checked,
        "needs_update": plan.needs_update,
        "failed": len(plan.failures),
        "actions": [
            {
                "workflow_file": ref.source_file,
                "line": ref.line_number,
                "repo": ref.repo_path,
                "current_ref": ref.current_ref,
                "current_sha": ref.current_commit,
                "latest_tag": ref.latest_tag,
                "latest_sha": ref.latest_commit,
                "needs_update": ref.needs_update,
                "error": errors.get(id(ref)),
            }
            for references in actions.values()
            for ref in references
        ],
    }
    output = json.dumps(data, indent=2)
    logger.info("JSON report: %d reference(s), %d bytes", plan.checked, len(output))
    return output
