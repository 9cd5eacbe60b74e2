"""
Policy loaders package.

This package contains implementations of the PolicyLoader interface
for loading review policies from different sources.
"""

from src.rules.loaders.github_loader import GitHubPolicyLoader, parse_policy

__all__ = [
    "GitHubPolicyLoader",
    "parse_policy",
]
