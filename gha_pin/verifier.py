"""
Verifier: every action reference must already be pinned to a commit SHA.

Read-only and offline; the GitHub API is never contacted.
"""

import logging

from gha_pin.errors import VerificationError
from gha_pin.parser.workflow_parser import WorkflowActions

logger = logging.getLogger(__name__)


def find_unpinned(actions: WorkflowActions) -> list[str]:
    """`file:line repo@ref` for each reference whose ref is not a commit SHA."""
    unpinned = []
    for path, references in actions.items():
        for ref in references:
            if not ref.is_pinned:
                unpinned.append(f"{path}:{ref.line_number} {ref.repo_path}@{ref.current_ref}")
    return unpinned


def verify_pinned(actions: WorkflowActions) -> None:
    """
    Raises:
        VerificationError: Listing every unpinned reference.
    """
    unpinned = find_unpinned(actions)
    if unpinned:
        logger.info("%d unpinned reference(s)", len(unpinned))
        raise VerificationError(unpinned)
