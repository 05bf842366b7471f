"""
CLI entry point: ties together parser -> resolver -> planner -> updater -> reporter.

Usage:
  # Report which actions have a newer release (never writes):
  gha-pin check

  # Same, as JSON:
  gha-pin check --format json

  # Pin every workflow (asks before each file):
  gha-pin update

  # Pin one workflow (bare names are looked up in .github/workflows/):
  gha-pin update ci.yml

  # Fail if any action is referenced by tag or branch:
  gha-pin verify

  # Install pre-commit / pre-push hooks:
  gha-pin install-hooks

Environment:
  GITHUB_TOKEN or GH_TOKEN - GitHub API token for higher rate limits
  (or authenticate with 'gh auth login' to use the gh CLI token)

Exit codes:
  0 - success
  1 - any reported error (unreadable files, unresolvable refs, failed
      updates, unpinned actions, API rate limit, ...)
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

import click
import yaml

from gha_pin.config import BuildInfo, Config, load_config
from gha_pin.errors import BackupError, GhaPinError, RateLimitError, VerificationError, WorkflowReadError
from gha_pin.hooks import install_hooks as write_hooks
from gha_pin.parser import ActionReference, ScanResult, parse_workflow, scan_workflows
from gha_pin.registry import GitHubClient, Resolver, get_github_token
from gha_pin.reporter import (
    format_check_line,
    report_json,
    report_pending,
    report_summary,
    report_unpinned,
    report_update,
)
from gha_pin.updater import PlanReport, normalize_target, plan_updates, update_workflows
from gha_pin.verifier import verify_pinned

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1


@dataclass
class AppContext:
    config: Config
    build: BuildInfo


def _setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _scan(config: Config, quiet: bool = False) -> ScanResult:
    """Scan the workflows directory, exiting on a fatal read error."""
    if not quiet:
        click.echo("Scanning workflow files...")
    try:
        scan = scan_workflows(config.workflows_dir, exclude=config.exclude)
    except WorkflowReadError as e:
        click.echo(f"Error scanning workflows: {e}", err=True)
        sys.exit(EXIT_ERROR)

    for error in scan.errors:
        click.echo(f"Warning: {error}", err=True)
    return scan


def _scan_target(target: str) -> ScanResult:
    """Parse a single workflow named on the command line, exiting if it is unusable."""
    if not os.path.isfile(target):
        click.echo(f"Error: workflow file not found: {target}", err=True)
        sys.exit(EXIT_ERROR)
    click.echo(f"Scanning {target}...")
    try:
        references = parse_workflow(target)
    except WorkflowReadError as e:
        click.echo(f"Error scanning workflows: {e}", err=True)
        sys.exit(EXIT_ERROR)
    return ScanResult(actions={target: references} if references else {})


def _build_resolver(config: Config, announce: bool = True) -> Resolver:
    token, source = get_github_token()
    client = GitHubClient(token=token or None, api_url=config.api_url, timeout=config.timeout)
    if token:
        logger.info("Authenticated via %s", source)
        if announce:
            click.echo(f"GitHub API: authenticated via {source} (higher rate limits available)")
    elif announce:
        click.echo("GitHub API: unauthenticated (lower rate limits)")
        click.echo("  Set GITHUB_TOKEN or GH_TOKEN, or authenticate with 'gh auth login'.")
    return Resolver(client)


def _progress_printer():
    """Progress callback for plan_updates that prints a header per file."""
    current = {"file": None}

    def progress(ref: ActionReference, error) -> None:
        if ref.source_file != current["file"]:
            current["file"] = ref.source_file
            click.echo(f"\n{ref.source_file}:")
        click.echo(format_check_line(ref, error))

    return progress


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging.")
@click.option("--config", "config_path", default=None, help="Path to .gha-pin.yml config file.")
@click.option("--workflows-dir", default=None, help="Workflow directory (overrides config file).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[str], workflows_dir: Optional[str]):
    """GitHub CI hash updater: pin GitHub Actions to commit SHAs."""
    _setup_logging(verbose)
    build = ctx.obj if isinstance(ctx.obj, BuildInfo) else BuildInfo()

    try:
        config = load_config(config_path=config_path)
    except (OSError, yaml.YAMLError, ValueError) as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(EXIT_ERROR)
    if workflows_dir:
        config.workflows_dir = workflows_dir

    ctx.obj = AppContext(config=config, build=build)


@cli.command()
@click.option("--format", "output_format", type=click.Choice(["console", "json"]), default="console", help="Output format.")
@click.pass_obj
def check(app: AppContext, output_format: str):
    """Check for action updates without applying them."""
    console = output_format == "console"
    scan = _scan(app.config, quiet=not console)

    if not scan.actions:
        if console:
            click.echo("No GitHub Actions found in workflow files")
        else:
            click.echo(report_json({}, PlanReport()))
        sys.exit(EXIT_ERROR if scan.errors else EXIT_OK)

    resolver = _build_resolver(app.config, announce=console)
    if console:
        click.echo("Checking for action updates...")

    try:
        plan = plan_updates(resolver, scan.actions, progress=_progress_printer() if console else None)
    except RateLimitError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if console:
        report_summary(scan.actions, plan)
    else:
        click.echo(report_json(scan.actions, plan))

    sys.exit(EXIT_ERROR if plan.failures or scan.errors else EXIT_OK)


@cli.command()
@click.argument("target", required=False)
@click.option("-y", "--yes", is_flag=True, help="Apply without asking for confirmation.")
@click.pass_obj
def update(app: AppContext, target: Optional[str], yes: bool):
    """Update all workflows, or only TARGET, to the latest action releases.

    A <file>.bak backup of every file to be changed is written first; a file
    whose update fails is restored from it.
    """
    if target:
        target = normalize_target(target, app.config.workflows_dir)
        scan = _scan_target(target)
    else:
        scan = _scan(app.config)
    actions = scan.actions

    if not actions:
        click.echo(f"No GitHub Actions found in {target or 'workflow files'}")
        sys.exit(EXIT_ERROR if scan.errors else EXIT_OK)

    resolver = _build_resolver(app.config)
    click.echo("Checking for action updates...")
    try:
        plan = plan_updates(resolver, actions, progress=_progress_printer())
    except RateLimitError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    def confirm(path: str, references: list[ActionReference]) -> bool:
        report_pending(path, references)
        if yes:
            return True
        return click.confirm(f"Update {path}?", default=False)

    click.echo("\nUpdating workflow files...")
    try:
        result = update_workflows(actions, target=target, confirm=confirm)
    except BackupError as e:
        click.echo(f"Error updating actions: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if not (result.updated or result.unchanged or result.skipped or result.failed):
        click.echo("No updates needed for any workflow files")
    else:
        report_update(result)

    if plan.failures or scan.errors or not result.ok:
        click.echo("Update finished with errors.", err=True)
        sys.exit(EXIT_ERROR)

    click.echo("Update process completed!")
    sys.exit(EXIT_OK)


@cli.command()
@click.pass_obj
def verify(app: AppContext):
    """Verify all actions are pinned to commit SHAs."""
    click.echo("Verifying all actions are pinned to commit SHAs...")
    scan = _scan(app.config, quiet=True)

    try:
        verify_pinned(scan.actions)
    except VerificationError as e:
        report_unpinned(e.unpinned)
        click.echo(f"Verification failed: {e}", err=True)
        sys.exit(EXIT_ERROR)

    report_unpinned([])
    sys.exit(EXIT_ERROR if scan.errors else EXIT_OK)


@cli.command("install-hooks")
def install_hooks():
    """Install pre-commit and pre-push git hooks."""
    try:
        written = write_hooks(".")
    except GhaPinError as e:
        click.echo(f"Failed to install hooks: {e}", err=True)
        sys.exit(EXIT_ERROR)

    for path in written:
        click.echo(f"Installed {path}")
    click.echo("pre-commit: verifies every action is pinned to a commit SHA")
    click.echo("pre-push:   checks for action updates (warning only)")
    click.echo("To bypass hooks (not recommended): git commit --no-verify")


@cli.command()
@click.pass_obj
def version(app: AppContext):
    """Show version information."""
    click.echo("GitHub CI Hash Updater (gha-pin)")
    click.echo(f"Version: {app.build.version}")
    click.echo(f"Git Commit: {app.build.git_commit}")
    click.echo(f"Build Time: {app.build.build_time}")
    click.echo(f"Python Version: {app.build.python_version}")


def main(build: Optional[BuildInfo] = None) -> None:
    """Console-script entry point; build metadata is passed in, not global."""
    cli(obj=build or BuildInfo())


if __name__ == "__main__":
    main()
