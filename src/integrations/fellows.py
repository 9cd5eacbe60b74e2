"""
Fellowship rank registry backed by a roster file on GitHub.

The roster is a YAML document listing every fellow's GitHub handle and rank:

    fellows:
      - github: "@alice"
        rank: 4
      - github: bob
        rank: 1
"""

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.core.errors import ConfigurationError, EmptyRequirementError
from src.integrations.github.api import GitHubClient
from src.rules.interface import FellowsApi

logger = structlog.get_logger(__name__)


class FellowEntry(BaseModel):
    github: str
    rank: int = Field(ge=1, le=9)

    @field_validator("github")
    @classmethod
    def _strip_handle(cls, value: str) -> str:
        # Handles are often written as "@login"
        login = value.strip().lstrip("@")
        if not login:
            raise ValueError("empty GitHub handle")
        return login


class FellowsRoster(BaseModel):
    fellows: list[FellowEntry] = Field(default_factory=list)


def parse_roster(content: str) -> list[tuple[str, int]]:
    """Parse a roster document into (login, rank) pairs, in document order."""
    try:
        data = yaml.safe_load(content) or {}
        roster = FellowsRoster.model_validate(data)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Fellows roster is not valid YAML: {e}") from e
    except ValidationError as e:
        raise ConfigurationError("Fellows roster is malformed", errors=e.errors()) from e

    # A fellow listed twice keeps the highest rank, not the last one listed
    ranks: dict[str, tuple[str, int]] = {}
    for entry in roster.fellows:
        key = entry.github.casefold()
        if key not in ranks or ranks[key][1] < entry.rank:
            ranks[key] = (entry.github, entry.rank)
    return list(ranks.values())


class RosterFellowsApi(FellowsApi):
    """
    FellowsApi reading the rank roster from a repository file.

    The roster is fetched once per instance; processors build one instance per
    run, so a run always sees a single snapshot of the ranks.
    """

    def __init__(self, client: GitHubClient, repo: str, path: str, installation_id: int):
        self.client = client
        self.repo = repo
        self.path = path
        self.installation_id = installation_id
        self._fellows: list[tuple[str, int]] | None = None

    async def list_fellows(self) -> list[tuple[str, int]]:
        if self._fellows is None:
            content = await self.client.get_file_content(self.repo, self.path, self.installation_id)
            if content is None:
                raise ConfigurationError(f"Fellows roster not found: {self.repo}/{self.path}")
            self._fellows = parse_roster(content)
            logger.info("fellows_roster_loaded", repo=self.repo, path=self.path, fellows=len(self._fellows))
        return self._fellows

    async def get_team_members(self, team_name: str) -> list[str]:
        """Every fellow whose rank is at least `team_name` (a rank, as a string)."""
        try:
            required_rank = int(team_name)
        except ValueError as e:
            raise ConfigurationError(f"'{team_name}' is not a fellowship rank") from e

        members = [login for login, rank in await self.list_fellows() if rank >= required_rank]
        if not members:
            raise EmptyRequirementError(f"No users have been found with the rank {required_rank} or above")
        return members
