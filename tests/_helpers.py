"""In-memory stand-in for the GitHub API plus the SHAs it serves."""

from gha_pin.errors import ReleaseNotFoundError

CHECKOUT_LATEST = "11bd71901bbe5b1630ceea73d27597364c9af683"
CHECKOUT_V4 = "b4ffde65f46336ab88eb53be808477a3936bae11"
CHECKOUT_TAG_OBJECT = "c3f1e2a9b8d7c6e5f4a3b2c1d0e9f8a7b6c5d4e3"
SETUP_PYTHON_LATEST = "0b93645e9fea7318ecaed2b359559ac225c90a2b"
SETUP_PYTHON_V5 = "42375524e23c412d93fb67b49958b491fce71c38"
CODEQL_LATEST = "aa578102511db1f4524ed59b8cc2bae4f6e88195"
CODEQL_V3 = "dd746615b3b9d728a6a37ca2045b68ca76d4841a"
MAIN_HEAD = "5f2c9a1d3e4b6a7c8d9e0f1a2b3c4d5e6f7a8b9c"


class FakeGitHubClient:
    """Same surface as GitHubClient, answered from dicts."""

    def __init__(self, releases=None, refs=None, tags=None):
        self.releases = releases or {}   # "owner/repo" -> tag name
        self.refs = refs or {}           # "owner/repo:tags/v4" -> {"type": ..., "sha": ...}
        self.tags = tags or {}           # tag object sha -> commit sha
        self.calls = []

    def get_latest_release(self, owner, repo):
        self.calls.append(("release", owner, repo))
        tag = self.releases.get(f"{owner}/{repo}")
        if tag is None:
            raise ReleaseNotFoundError(owner, repo)
        return {"tag_name": tag}

    def get_ref(self, owner, repo, ref):
        self.calls.append(("ref", owner, repo, ref))
        obj = self.refs.get(f"{owner}/{repo}:{ref}")
        if obj is None:
            return None
        return {"ref": f"refs/{ref}", "object": dict(obj)}

    def get_tag(self, owner, repo, sha):
        self.calls.append(("tag", owner, repo, sha))
        commit = self.tags.get(sha)
        if commit is None:
            return None
        return {"sha": sha, "object": {"type": "commit", "sha": commit}}


def standard_client():
    """Registry contents matching the fixture workflows."""
    return FakeGitHubClient(
        releases={
            "actions/checkout": "v4.2.2",
            "actions/setup-python": "v5.3.0",
            "github/codeql-action": "codeql-bundle-v2.20.1",
        },
        refs={
            "actions/checkout:tags/v4.2.2": {"type": "tag", "sha": CHECKOUT_TAG_OBJECT},
            "actions/checkout:tags/v4": {"type": "commit", "sha": CHECKOUT_V4},
            "actions/checkout:heads/main": {"type": "commit", "sha": MAIN_HEAD},
            "actions/setup-python:tags/v5.3.0": {"type": "commit", "sha": SETUP_PYTHON_LATEST},
            "actions/setup-python:tags/v5": {"type": "commit", "sha": SETUP_PYTHON_V5},
            "github/codeql-action:tags/codeql-bundle-v2.20.1": {"type": "commit", "sha": CODEQL_LATEST},
            "github/codeql-action:tags/codeql-bundle-v3": {"type": "commit", "sha": CODEQL_V3},
        },
        tags={CHECKOUT_TAG_OBJECT: CHECKOUT_LATEST},
    )
