"""
Team membership lookups against a GitHub organization.
"""

import structlog

from src.core.errors import EmptyRequirementError
from src.integrations.github.api import GitHubClient
from src.rules.interface import TeamApi

logger = structlog.get_logger(__name__)


class GitHubTeamsApi(TeamApi):
    """TeamApi resolving team slugs to member logins in one organization."""

    def __init__(self, client: GitHubClient, org: str, installation_id: int):
        self.client = client
        self.org = org
        self.installation_id = installation_id

    async def get_team_members(self, team_name: str) -> list[str]:
        members = await self.client.list_team_members(self.org, team_name, self.installation_id)
        logins = [member["login"] for member in members]
        if not logins:
            raise EmptyRequirementError(f"Team '{team_name}' of '{self.org}' has no members")
        logger.debug("team_members_fetched", org=self.org, team=team_name, count=len(logins))
        return logins
