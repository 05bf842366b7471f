"""
File updater: rewrite flagged `uses:` lines in a single workflow file.

Only the `@ref  # comment` tail of a flagged line changes; every other byte
of the file is written back exactly as it was read.
"""

import logging
from enum import Enum
from typing import Sequence

from gha_pin.errors import WorkflowWriteError
from gha_pin.parser.workflow_parser import ActionReference, read_workflow, split_uses_line

logger = logging.getLogger(__name__)


class UpdateOutcome(Enum):
    UPDATED = "updated"
    NO_OP = "no-op"


def rewrite_line(line: str, ref: ActionReference) -> str:
    """
    Return line pinned to ref.latest_commit with a `# latest_tag` comment.

    A line that no longer holds ref's action is returned unchanged.
    """
    parts = split_uses_line(line)
    if parts is None or parts.repo_path != ref.repo_path:
        return line
    ending = "\r" if line.endswith("\r") else ""
    return (
        f"{parts.prefix}{parts.repo_path}@{ref.latest_commit}{parts.quote}"
        f" # {ref.latest_tag}{ending}"
    )


def pending_rewrites(lines: Sequence[str], references: Sequence[ActionReference]) -> dict[int, str]:
    """Map of 0-based line index -> new text, for flagged lines that would change."""
    pending = {}
    for ref in references:
        if not ref.needs_update:
            continue
        index = ref.line_number - 1
        if index >= len(lines):
            logger.warning("%s: line is past the end of the file, skipping", ref.location)
            continue
        new_line = rewrite_line(lines[index], ref)
        if new_line == lines[index]:
            continue
        pending[index] = new_line
    return pending


def apply_updates(path: str, references: Sequence[ActionReference]) -> UpdateOutcome:
    """
    Pin every flagged reference in path to its latest commit.

    Safe to call repeatedly: when every flagged line already holds its
    target, the file is not written at all and NO_OP is returned.

    Raises:
        WorkflowReadError: If the file can't be read.
        WorkflowWriteError: If the file can't be written back.
    """
    lines = read_workflow(path).split("\n")

    pending = pending_rewrites(lines, references)
    if not pending:
        logger.info("%s: already up to date, no changes needed", path)
        return UpdateOutcome.NO_OP

    # Bottom-up so edits never shift the line numbers still to be processed
    for index in sorted(pending, reverse=True):
        logger.debug("%s:%d: %s -> %s", path, index + 1, lines[index].strip(), pending[index].strip())
        lines[index] = pending[index]

    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write("\n".join(lines))
    except OSError as e:
        raise WorkflowWriteError(path, str(e)) from e

    logger.info("%s: rewrote %d line(s)", path, len(pending))
    return UpdateOutcome.UPDATED
