"""
Repository configuration.
"""

from dataclasses import dataclass


@dataclass
class RepoConfig:
    """Where the review policy lives inside the base repository."""

    config_path: str = ".github/review-bot.yml"
