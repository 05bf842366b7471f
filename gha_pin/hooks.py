"""
Git hook installer.

Writes a pre-commit hook that blocks commits with unpinned actions and a
pre-push hook that reports available action updates without blocking.
"""

import logging
import os
from pathlib import Path

from gha_pin.errors import GhaPinError

logger = logging.getLogger(__name__)

HOOK_MODE = 0o755

PRE_COMMIT_HOOK = """#!/bin/sh
# Pre-commit hook installed by gha-pin
set -e

echo "Verifying GitHub Actions are pinned to commit SHAs..."
if ! gha-pin verify; then
    echo "Some GitHub Actions are not pinned to commit SHAs."
    echo "Run 'gha-pin update' to pin them."
    exit 1
fi
"""

PRE_PUSH_HOOK = """#!/bin/sh
# Pre-push hook installed by gha-pin

echo "Checking for GitHub Action updates..."
if ! gha-pin check >/dev/null 2>&1; then
    echo "Warning: could not check for GitHub Action updates"
    echo "  (API rate limits or network issues); run 'gha-pin check' for details"
fi
exit 0
"""

HOOKS = {
    "pre-commit": PRE_COMMIT_HOOK,
    "pre-push": PRE_PUSH_HOOK,
}


def install_hooks(repo_root: str = ".") -> list[str]:
    """
    Write the gha-pin hooks into repo_root/.git/hooks.

    Returns:
        Paths of the hooks written.

    Raises:
        GhaPinError: If repo_root isn't a git checkout or a hook can't be written.
    """
    git_dir = Path(repo_root) / ".git"
    if not git_dir.is_dir():
        raise GhaPinError(f"not in a git repository (no .git directory in {repo_root})")

    hooks_dir = git_dir / "hooks"
    written = []
    try:
        hooks_dir.mkdir(parents=True, exist_ok=True)
        for name, script in HOOKS.items():
            hook_path = hooks_dir / name
            hook_path.write_text(script)
            os.chmod(hook_path, HOOK_MODE)
            logger.info("Installed %s hook at %s", name, hook_path)
            written.append(str(hook_path))
    except OSError as e:
        raise GhaPinError(f"failed to write git hooks: {e}") from e
    return written
