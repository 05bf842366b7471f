"""Shared fixtures for all tests."""

import os
import shutil

import pytest

from gha_pin.parser import scan_workflows
from gha_pin.registry import Resolver
from tests._helpers import standard_client


FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures/.github/workflows")


@pytest.fixture
def fixtures_dir():
    """Path to the fixtures workflow directory."""
    return FIXTURES_DIR


@pytest.fixture
def workflows_dir(tmp_path):
    """A writable copy of the fixture workflows."""
    target = tmp_path / ".github" / "workflows"
    target.mkdir(parents=True)
    for name in ("unpinned.yml", "pinned.yml"):
        shutil.copy(os.path.join(FIXTURES_DIR, name), target / name)
    return target


@pytest.fixture
def fake_client():
    return standard_client()


@pytest.fixture
def resolver(fake_client):
    return Resolver(fake_client)


@pytest.fixture
def scanned(workflows_dir):
    """Scan of the writable fixture copy."""
    return scan_workflows(str(workflows_dir))
