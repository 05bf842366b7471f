"""
Resolve action versions to commit SHAs.

A tag ref may point straight at a commit (lightweight tag) or at a tag
object that in turn points at the commit (annotated tag). Callers only
ever see the commit SHA.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from gha_pin.errors import ReleaseNotFoundError, UnresolvableRefError
from gha_pin.registry.github_client import GitHubClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefRewriteRule:
    """Prepend `prefix` to refs starting with `when_startswith` before lookup."""
    when_startswith: str
    prefix: str

    def apply(self, ref: str) -> str:
        if ref.startswith(self.when_startswith):
            return self.prefix + ref
        return ref


# (owner, repo) -> rule. CodeQL publishes its releases as codeql-bundle-vX tags.
REF_REWRITE_RULES: dict[tuple[str, str], RefRewriteRule] = {
    ("github", "codeql-action"): RefRewriteRule(when_startswith="v", prefix="codeql-bundle-"),
}


def rewrite_ref(
    owner: str,
    repo: str,
    ref: str,
    rules: Mapping[tuple[str, str], RefRewriteRule] = REF_REWRITE_RULES,
) -> str:
    """Apply the rewrite rule for owner/repo, if there is one."""
    rule = rules.get((owner, repo))
    if rule is None:
        return ref
    rewritten = rule.apply(ref)
    if rewritten != ref:
        logger.debug("Rewrote %s/%s ref %s -> %s", owner, repo, ref, rewritten)
    return rewritten


class Resolver:
    """Latest-release and ref-to-commit lookups, memoised for one run."""

    def __init__(
        self,
        client: GitHubClient,
        rules: Mapping[tuple[str, str], RefRewriteRule] = REF_REWRITE_RULES,
    ):
        self.client = client
        self.rules = rules
        self._latest: dict[tuple[str, str], str] = {}
        self._no_release: set[tuple[str, str]] = set()
        self._commits: dict[tuple[str, str, str], str] = {}

    def latest_release(self, owner: str, repo: str) -> str:
        """
        Tag name of the latest stable release.

        Raises:
            ReleaseNotFoundError: If owner/repo has no release.
        """
        key = (owner, repo)
        if key in self._no_release:
            raise ReleaseNotFoundError(owner, repo)
        if key not in self._latest:
            try:
                release = self.client.get_latest_release(owner, repo)
            except ReleaseNotFoundError:
                self._no_release.add(key)
                raise
            tag = release.get("tag_name")
            if not tag:
                self._no_release.add(key)
                raise ReleaseNotFoundError(owner, repo)
            self._latest[key] = tag
            logger.info("Latest release of %s/%s: %s", owner, repo, self._latest[key])
        return self._latest[key]

    def resolve_commit(self, owner: str, repo: str, ref: str) -> str:
        """
        Resolve a tag or branch name to a commit SHA.

        Tries, in order: annotated tag (peeled one level), lightweight tag,
        branch head.

        Raises:
            UnresolvableRefError: If no tag or branch matches.
        """
        ref = rewrite_ref(owner, repo, ref, self.rules)
        key = (owner, repo, ref)
        if key not in self._commits:
            self._commits[key] = self._resolve(owner, repo, ref)
        return self._commits[key]

    def _resolve(self, owner: str, repo: str, ref: str) -> str:
        sha = self._resolve_tag(owner, repo, ref)
        if sha:
            return sha

        head = self.client.get_ref(owner, repo, f"heads/{ref}")
        sha = _object_sha(head)
        if sha:
            logger.debug("%s/%s@%s is a branch at %s", owner, repo, ref, sha)
            return sha

        raise UnresolvableRefError(owner, repo, ref)

    def _resolve_tag(self, owner: str, repo: str, ref: str) -> Optional[str]:
        tag_ref = self.client.get_ref(owner, repo, f"tags/{ref}")
        if tag_ref is None:
            return None

        obj = tag_ref.get("object") or {}
        if obj.get("type") == "tag":
            tag = self.client.get_tag(owner, repo, obj.get("sha", ""))
            sha = _object_sha(tag)
            if sha:
                logger.debug("%s/%s@%s is an annotated tag on %s", owner, repo, ref, sha)
                return sha
            logger.warning(
                "Could not dereference annotated tag %s for %s/%s", ref, owner, repo,
            )
            return None

        sha = obj.get("sha")
        if sha:
            logger.debug("%s/%s@%s is a lightweight tag on %s", owner, repo, ref, sha)
        return sha or None


def _object_sha(data: Optional[dict]) -> Optional[str]:
    if not data:
        return None
    return (data.get("object") or {}).get("sha") or None
