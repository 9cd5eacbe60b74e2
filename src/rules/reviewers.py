"""
Reviewer resolver.

Expands a reviewer requirement (explicit users plus teams) into the logins
whose approval counts towards it.
"""

from typing import Any

from src.core.errors import EmptyRequirementError, InsufficientPoolError
from src.rules.context import ReviewContext
from src.rules.models import ReviewerGroup, ReviewerRequirement
from src.rules.utils import unique


async def resolve_group(group: ReviewerGroup, context: ReviewContext, log: Any) -> list[str]:
    """
    Logins of the listed users followed by the members of each team, de-duplicated.

    Raises:
        EmptyRequirementError: If the group lists neither users nor teams.
    """
    if group.is_empty:
        raise EmptyRequirementError("Reviewer requirement declares neither 'users' nor 'teams'")

    members: list[list[str]] = []
    for team in group.teams:
        team_members = await context.team_members(team)
        log.debug("team_members_resolved", team=team, members=team_members)
        members.append(team_members)

    return unique(group.users, *members)


async def resolve_requirement(requirement: ReviewerRequirement, context: ReviewContext, log: Any) -> list[str]:
    """
    Candidates of a requirement, checked against its minimum approvals.

    Raises:
        EmptyRequirementError: If the requirement lists neither users nor teams,
            or they resolve to nobody.
        InsufficientPoolError: If fewer candidates exist than approvals required.
    """
    candidates = await resolve_group(requirement, context, log)
    ensure_pool(requirement.min_approvals, candidates, source=describe(requirement))
    return candidates


def ensure_pool(min_approvals: int, candidates: list[str], source: str = "") -> None:
    """Reject a requirement that no set of approvals could ever fulfil."""
    if not candidates:
        raise EmptyRequirementError(f"Reviewer requirement resolved to no users ({source})")
    if len(candidates) < min_approvals:
        raise InsufficientPoolError(min_approvals, len(candidates), source)


def describe(group: ReviewerGroup) -> str:
    parts = []
    if group.users:
        parts.append(f"users: {', '.join(group.users)}")
    if group.teams:
        parts.append(f"teams: {', '.join(group.teams)}")
    return "; ".join(parts)
