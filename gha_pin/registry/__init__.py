from .github_client import GitHubClient, get_github_token
from .resolver import REF_REWRITE_RULES, RefRewriteRule, Resolver, rewrite_ref

__all__ = [
    "GitHubClient",
    "get_github_token",
    "REF_REWRITE_RULES",
    "RefRewriteRule",
    "Resolver",
    "rewrite_ref",
]
