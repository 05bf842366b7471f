"""
Parser for action references in GitHub Actions workflow files.

Workflows are treated as line-oriented text: every line of the form

    uses: owner/repo[/path]@ref  # optional comment

produces one ActionReference. Nothing else in the document is interpreted,
so rewriting a reference never disturbs formatting elsewhere in the file.
"""

import fnmatch
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple, Optional, Sequence

from gha_pin.errors import WorkflowReadError

logger = logging.getLogger(__name__)

COMMIT_SHA_PATTERN = re.compile(r"^[0-9a-f]{40}$")

USES_PATTERN = re.compile(
    r"^(?P<prefix>\s*(?:-\s+)?uses:\s+(?P<quote>['\"]?))"
    r"(?!\./|docker://)"
    r"(?P<repo>[^@\s'\"#/]+/[^@\s'\"#]+)"
    r"@(?P<ref>[0-9a-f]{40}|[^#\s'\"]+)"
    r"(?P<suffix>(?P=quote)(?:\s*#\s*(?P<comment>.*?))?\s*)$"
)

WORKFLOW_SUFFIXES = (".yml", ".yaml")


def is_commit_sha(ref: str) -> bool:
    """True if ref has the shape of a full 40-char lowercase commit SHA."""
    return bool(COMMIT_SHA_PATTERN.match(ref))


class UsesLine(NamedTuple):
    """A `uses:` line cut into pieces; prefix + repo_path + "@" + ref + suffix is the line."""
    prefix: str
    quote: str
    repo_path: str
    ref: str
    suffix: str
    comment: str


@dataclass
class ActionReference:
    """One `uses:` reference found in one workflow file."""
    repo_path: str        # e.g. "actions/checkout" or "github/codeql-action/init"
    current_ref: str      # e.g. "v4" or a commit SHA
    line_number: int      # 1-based
    original_line: str
    source_file: str
    comment: str = ""     # trailing comment, e.g. "v4.2.2"
    current_commit: str = ""
    latest_tag: str = ""
    latest_commit: str = ""
    needs_update: bool = False

    def __post_init__(self):
        if not self.current_commit and is_commit_sha(self.current_ref):
            self.current_commit = self.current_ref

    @property
    def owner(self) -> str:
        return self.repo_path.split("/")[0]

    @property
    def repo(self) -> str:
        return self.repo_path.split("/")[1]

    @property
    def is_pinned(self) -> bool:
        return is_commit_sha(self.current_ref)

    @property
    def location(self) -> str:
        return f"{self.source_file}:{self.line_number}"


# Mapping of workflow file path -> references in file order
WorkflowActions = dict[str, list[ActionReference]]


@dataclass
class ScanResult:
    """References found by a directory scan, plus files that could not be read."""
    actions: WorkflowActions = field(default_factory=dict)
    errors: list[WorkflowReadError] = field(default_factory=list)


def split_uses_line(line: str) -> Optional[UsesLine]:
    """Cut a workflow line into its reference pieces, or None if it isn't one."""
    match = USES_PATTERN.match(line)
    if not match:
        return None
    return UsesLine(
        prefix=match.group("prefix"),
        quote=match.group("quote"),
        repo_path=match.group("repo"),
        ref=match.group("ref"),
        suffix=match.group("suffix"),
        comment=(match.group("comment") or "").strip(),
    )


def parse_workflow_text(text: str, source_file: str) -> list[ActionReference]:
    """Extract every action reference from workflow text, in line order."""
    references = []
    for index, line in enumerate(text.split("\n")):
        parts = split_uses_line(line)
        if parts is None:
            continue
        references.append(ActionReference(
            repo_path=parts.repo_path,
            current_ref=parts.ref,
            line_number=index + 1,
            original_line=line,
            source_file=source_file,
            comment=parts.comment,
        ))
        logger.debug(
            "%s:%d: %s@%s", source_file, index + 1, parts.repo_path, parts.ref[:12],
        )
    return references


def read_workflow(path: str) -> str:
    """Read a workflow file verbatim (line endings untouched)."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise WorkflowReadError(path, str(e)) from e


def parse_workflow(path: str) -> list[ActionReference]:
    """
    Parse a single workflow file.

    Raises:
        WorkflowReadError: If the file can't be read.
    """
    logger.info("Parsing workflow: %s", path)
    return parse_workflow_text(read_workflow(path), path)


def scan_workflows(workflows_dir: str, exclude: Sequence[str] = ()) -> ScanResult:
    """
    Parse every *.yml / *.yaml file directly inside workflows_dir.

    Files that can't be read are recorded in ScanResult.errors and the scan
    carries on. Files without any reference are left out of the mapping.

    Raises:
        WorkflowReadError: If workflows_dir itself can't be listed.
    """
    path = Path(workflows_dir)
    try:
        entries = sorted(path.iterdir())
    except OSError as e:
        raise WorkflowReadError(workflows_dir, str(e)) from e

    workflow_files = [
        entry for entry in entries
        if entry.suffix in WORKFLOW_SUFFIXES and not entry.is_dir()
    ]
    logger.debug("Found %d workflow file(s) in %s", len(workflow_files), workflows_dir)

    result = ScanResult()
    for entry in workflow_files:
        file_path = str(entry)
        if any(fnmatch.fnmatch(file_path, pat) or fnmatch.fnmatch(entry.name, pat) for pat in exclude):
            logger.info("Excluded %s via config", file_path)
            continue
        try:
            references = parse_workflow(file_path)
        except WorkflowReadError as e:
            logger.info("Skipping unreadable workflow %s: %s", file_path, e.reason)
            result.errors.append(e)
            continue
        if references:
            result.actions[file_path] = references

    logger.info(
        "Scanned %s: %d reference(s) in %d file(s)",
        workflows_dir,
        sum(len(refs) for refs in result.actions.values()),
        len(result.actions),
    )
    return result
