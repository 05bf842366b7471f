"""
Update planner: decide which references need to move to the latest release.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from gha_pin.errors import RateLimitError, RegistryError
from gha_pin.parser.workflow_parser import ActionReference, WorkflowActions
from gha_pin.registry.resolver import Resolver

logger = logging.getLogger(__name__)


@dataclass
class PlanFailure:
    """A reference that could not be checked."""
    reference: ActionReference
    error: RegistryError


@dataclass
class PlanReport:
    checked: int = 0
    needs_update: int = 0
    failures: list[PlanFailure] = field(default_factory=list)


# Called after each reference is checked: (reference, error or None)
ProgressFunc = Callable[[ActionReference, Optional[RegistryError]], None]


def plan_reference(resolver: Resolver, ref: ActionReference) -> None:
    """
    Fill in latest_tag, latest_commit, current_commit and needs_update.

    Raises:
        RegistryError: If the latest release or either commit can't be resolved.
    """
    owner, repo = ref.owner, ref.repo

    ref.latest_tag = resolver.latest_release(owner, repo)
    ref.latest_commit = resolver.resolve_commit(owner, repo, ref.latest_tag)

    if not ref.current_commit:
        ref.current_commit = resolver.resolve_commit(owner, repo, ref.current_ref)

    ref.needs_update = ref.current_commit != ref.latest_commit


def plan_updates(
    resolver: Resolver,
    actions: WorkflowActions,
    progress: Optional[ProgressFunc] = None,
) -> PlanReport:
    """
    Check every reference against its latest release.

    A reference that fails to resolve is logged, recorded in the report and
    left with needs_update=False; the remaining references are still checked.

    Raises:
        RateLimitError: The API quota ran out; nothing further can be checked.
    """
    total = sum(len(refs) for refs in actions.values())
    logger.info("Checking %d reference(s) in %d file(s)", total, len(actions))
    t0 = time.monotonic()
    report = PlanReport()

    for references in actions.values():
        for ref in references:
            error: Optional[RegistryError] = None
            try:
                plan_reference(resolver, ref)
            except RateLimitError:
                raise
            except RegistryError as e:
                logger.warning("%s %s@%s: %s", ref.location, ref.repo_path, ref.current_ref, e)
                ref.needs_update = False
                report.failures.append(PlanFailure(reference=ref, error=e))
                error = e
            else:
                if ref.needs_update:
                    report.needs_update += 1
            report.checked += 1
            if progress is not None:
                progress(ref, error)

    total_ms = (time.monotonic() - t0) * 1000
    logger.info(
        "Checked %d reference(s) in %.1fms: %d need update, %d failed",
        report.checked, total_ms, report.needs_update, len(report.failures),
    )
    return report
