"""
Update orchestrator: backup, confirm and apply across many workflow files.

    plan -> backup every file (all or nothing) -> per file: confirm -> apply
                                                         (restore on failure)

Backups (<file>.bak) are left on disk once the run finishes.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from gha_pin.errors import BackupError, GhaPinError
from gha_pin.parser.workflow_parser import ActionReference, WorkflowActions
from gha_pin.updater.file_updater import UpdateOutcome, apply_updates

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"

# Asked once per file before it is rewritten: (path, references) -> proceed?
ConfirmFunc = Callable[[str, list[ActionReference]], bool]


@dataclass
class FileFailure:
    path: str
    error: GhaPinError
    restored: bool


@dataclass
class UpdateReport:
    """What happened to each file in one update run."""
    updated: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[FileFailure] = field(default_factory=list)
    backups: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def backup_path(path: str) -> str:
    return path + BACKUP_SUFFIX


def normalize_target(target: str, workflows_dir: str) -> str:
    """A bare file name is taken to live in workflows_dir."""
    if not os.path.dirname(target):
        target = os.path.join(workflows_dir, target)
    return os.path.normpath(target)


def files_needing_update(actions: WorkflowActions, target: Optional[str] = None) -> list[str]:
    """Files with at least one flagged reference, optionally just target."""
    wanted = os.path.realpath(target) if target else None
    files = []
    for path, references in actions.items():
        if wanted is not None and os.path.realpath(path) != wanted:
            continue
        if any(ref.needs_update for ref in references):
            files.append(path)
    return files


def remove_backups(backups: Iterable[str]) -> None:
    for backup in backups:
        try:
            os.remove(backup)
        except OSError as e:
            logger.warning("Failed to clean up backup %s: %s", backup, e)


def create_backups(paths: Iterable[str]) -> dict[str, str]:
    """
    Copy every file to <file>.bak.

    Raises:
        BackupError: If any copy fails. Backups made before the failure are
            removed again, so either every file has a backup or none does.
    """
    created: dict[str, str] = {}
    for path in paths:
        backup = backup_path(path)
        try:
            shutil.copyfile(path, backup)
        except OSError as e:
            logger.error("Backup of %s failed: %s", path, e)
            remove_backups(created.values())
            raise BackupError(path, str(e)) from e
        created[path] = backup
        logger.info("Created backup: %s", backup)
    return created


def restore_backup(path: str, backup: str) -> bool:
    try:
        shutil.copyfile(backup, path)
    except OSError as e:
        logger.error("Failed to restore %s from %s: %s", path, backup, e)
        return False
    logger.info("Restored %s from %s", path, backup)
    return True


def _always(path: str, references: list[ActionReference]) -> bool:
    return True


def update_workflows(
    actions: WorkflowActions,
    target: Optional[str] = None,
    confirm: ConfirmFunc = _always,
) -> UpdateReport:
    """
    Apply planned updates to every file that needs one.

    A file whose rewrite fails is restored from its backup and the run moves
    on; files already rewritten are never rolled back.

    Raises:
        BackupError: If backups couldn't be created. No file was modified.
    """
    report = UpdateReport()
    files = files_needing_update(actions, target)
    if not files:
        logger.info("No workflow files need updates")
        return report

    backups = create_backups(files)
    report.backups = list(backups.values())

    for path in files:
        references = actions[path]
        if not confirm(path, references):
            logger.info("Skipped %s", path)
            report.skipped.append(path)
            continue

        try:
            outcome = apply_updates(path, references)
        except GhaPinError as e:
            logger.error("Failed to update %s: %s", path, e)
            restored = restore_backup(path, backups[path])
            report.failed.append(FileFailure(path=path, error=e, restored=restored))
            continue

        if outcome is UpdateOutcome.UPDATED:
            report.updated.append(path)
        else:
            report.unchanged.append(path)

    logger.info(
        "Update finished: %d updated, %d unchanged, %d skipped, %d failed",
        len(report.updated), len(report.unchanged), len(report.skipped), len(report.failed),
    )
    return report
