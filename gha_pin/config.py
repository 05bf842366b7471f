"""
Configuration file support for gha-pin.

Looks for a .gha-pin.yml file and loads settings that control where
workflows live, which workflow files to leave alone, and how the GitHub
API is reached.

Example .gha-pin.yml:

    # Directory scanned for *.yml / *.yaml workflow files
    workflows_dir: .github/workflows

    # Workflow files to leave alone (glob patterns)
    exclude:
      - "*/legacy.yml"

    # GitHub Enterprise users can point at their own API
    api_url: https://api.github.com

    # Per-request timeout in seconds
    timeout: 30
"""

import logging
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from gha_pin import __version__

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".gha-pin.yml"
DEFAULT_WORKFLOWS_DIR = ".github/workflows"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0


@dataclass
class Config:
    """Parsed gha-pin configuration."""
    workflows_dir: str = DEFAULT_WORKFLOWS_DIR
    exclude: list[str] = field(default_factory=list)
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT


@dataclass(frozen=True)
class BuildInfo:
    """Build metadata shown by `gha-pin version`."""
    version: str = __version__
    git_commit: str = "unknown"
    build_time: str = "unknown"

    @property
    def python_version(self) -> str:
        return platform.python_version()


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from a .gha-pin.yml file.

    Search order:
      1. Explicit config_path if provided
      2. .gha-pin.yml in the current working directory

    Returns a Config with defaults if no config file is found.
    """
    path = _find_config_file(config_path)

    if path is None:
        logger.debug("No config file found, using defaults")
        return Config()

    logger.info("Loading config from %s", path)

    with open(path, "r") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        logger.warning("Config file is not a YAML mapping, using defaults")
        return Config()

    exclude = raw.get("exclude") or []
    if isinstance(exclude, str):
        exclude = [exclude]

    return Config(
        workflows_dir=str(raw.get("workflows_dir", DEFAULT_WORKFLOWS_DIR)),
        exclude=[str(pattern) for pattern in exclude],
        api_url=str(raw.get("api_url", DEFAULT_API_URL)).rstrip("/"),
        timeout=float(raw.get("timeout", DEFAULT_TIMEOUT)),
    )


def _find_config_file(config_path: Optional[str] = None) -> Optional[str]:
    """Find the config file, returning its path or None."""
    if config_path:
        p = Path(config_path)
        if p.is_file():
            return str(p)
        logger.warning("Config file not found: %s", config_path)
        return None

    cwd_candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if cwd_candidate.is_file():
        return str(cwd_candidate)

    return None
