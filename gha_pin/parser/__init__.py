from .workflow_parser import (
    ActionReference,
    ScanResult,
    WorkflowActions,
    is_commit_sha,
    parse_workflow,
    parse_workflow_text,
    scan_workflows,
    split_uses_line,
)

__all__ = [
    "ActionReference",
    "ScanResult",
    "WorkflowActions",
    "is_commit_sha",
    "parse_workflow",
    "parse_workflow_text",
    "scan_workflows",
    "split_uses_line",
]
