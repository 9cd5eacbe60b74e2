"""
Review run configuration.
"""

from dataclasses import dataclass


@dataclass
class ReviewConfig:
    """Settings for a single policy evaluation run."""

    request_reviewers: bool = False
    check_run_name: str = "approvalgate"
    # Repository and path of the fellows rank roster, e.g. "org/fellows" + "roster.yml"
    fellows_roster_repo: str | None = None
    fellows_roster_path: str = "fellows.yml"
    # Organization used for team lookups; the repository owner when unset
    teams_org: str | None = None
