"""
Console reporter: prints check, update and verify results with colors.
"""

from typing import Optional

from gha_pin.errors import RegistryError
from gha_pin.parser.workflow_parser import ActionReference, WorkflowActions
from gha_pin.updater.orchestrator import UpdateReport
from gha_pin.updater.planner import PlanReport


# ANSI color codes for terminal output
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
BOLD = "\033[1m"
RESET = "\033[0m"


def _short(sha: str) -> str:
    return sha[:8]


def format_check_line(ref: ActionReference, error: Optional[RegistryError] = None) -> str:
    """One line of `check` progress for a single reference."""
    head = f"  {ref.repo_path}@{ref.current_ref} (line {ref.line_number})"
    if error is not None:
        return f"{head} {RED}error:{RESET} {error}"
    if ref.needs_update:
        return f"{head} {YELLOW}update available:{RESET} {ref.current_ref} -> {ref.latest_tag}"
    return f"{head} {GREEN}up to date{RESET} ({ref.latest_tag})"


def report_summary(actions: WorkflowActions, plan: PlanReport) -> str:
    """
    Format the per-file status and totals printed at the end of `check`.

    Returns:
        The formatted report string (also prints it).
    """
    failed = {id(f.reference) for f in plan.failures}
    lines = ["", f"{BOLD}Summary:{RESET}"]

    for path, references in actions.items():
        lines.append("")
        lines.append(f"{BOLD}{path}{RESET}")
        for ref in references:
            if id(ref) in failed:
                status = f"{RED}could not check{RESET}"
            elif ref.needs_update:
                status = f"{YELLOW}update available{RESET}"
            else:
                status = f"{GREEN}up to date{RESET}"
            lines.append(f"  {ref.repo_path}: {status} ({ref.latest_tag or '?'})")

    up_to_date = plan.checked - plan.needs_update - len(plan.failures)
    lines.append("")
    lines.append(f"Total: {plan.checked} action(s)")
    lines.append(f"{GREEN}Up to date: {up_to_date}{RESET}")
    lines.append(f"{YELLOW}Need updates: {plan.needs_update}{RESET}")
    if plan.failures:
        lines.append(f"{RED}Could not check: {len(plan.failures)}{RESET}")
    lines.append("")

    report = "\n".join(lines)
    print(report)
    return report


def report_pending(path: str, references: list[ActionReference]) -> str:
    """The changes about to be made to one file, shown before confirmation."""
    lines = ["", f"{BOLD}{path}{RESET}"]
    for ref in references:
        if ref.needs_update:
            lines.append(
                f"  {ref.repo_path}: {ref.current_ref} -> {ref.latest_tag} ({_short(ref.latest_commit)})"
            )
    report = "\n".join(lines)
    print(report)
    return report


def report_update(result: UpdateReport) -> str:
    """Per-file outcome of an update run."""
    lines = [""]
    for backup in result.backups:
        lines.append(f"  Backup: {backup}")
    for path in result.updated:
        lines.append(f"  {GREEN}Updated{RESET} {path}")
    for path in result.unchanged:
        lines.append(f"  {GREEN}Already up to date{RESET} {path}")
    for path in result.skipped:
        lines.append(f"  {YELLOW}Skipped{RESET} {path}")
    for failure in result.failed:
        restored = "restored from backup" if failure.restored else f"{RED}restore from backup FAILED{RESET}"
        lines.append(f"  {RED}Failed{RESET} {failure.path}: {failure.error} ({restored})")
    lines.append("")

    report = "\n".join(lines)
    print(report)
    return report


def report_unpinned(unpinned: list[str]) -> str:
    """Verification result."""
    if not unpinned:
        report = f"{GREEN}All actions are pinned to commit SHAs{RESET}"
    else:
        lines = [f"{RED}The following actions are not pinned to commit SHAs:{RESET}"]
        lines.extend(f"  {item}" for item in unpinned)
        report = "\n".join(lines)
    print(report)
    return report
