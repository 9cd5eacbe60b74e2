"""
Per-run view of the pull request under evaluation.

ReviewContext wraps the collaborator APIs with a RunCache so every external
lookup (files, approvals, team rosters, rank rosters) happens at most once per
run no matter how many rules ask for it.
"""

from src.core.errors import ConfigurationError
from src.core.utils.caching import RunCache
from src.rules.interface import FellowsApi, PullRequestApi, TeamApi
from src.rules.models import RankScoreTable


class ReviewContext:
    """Memoized inputs of one evaluation run."""

    def __init__(
        self,
        pull_request: PullRequestApi,
        teams: TeamApi,
        fellows: FellowsApi | None = None,
        score_table: RankScoreTable | None = None,
        cache: RunCache | None = None,
    ):
        self.pull_request = pull_request
        self.teams = teams
        self.fellows = fellows
        self.score_table = score_table or RankScoreTable()
        self.cache = cache or RunCache()

    @property
    def author(self) -> str:
        return self.pull_request.get_author()

    async def modified_files(self) -> list[str]:
        return await self.cache.get_or_load(("files",), self.pull_request.list_modified_files)

    async def approvals(self, count_author: bool) -> list[str]:
        return await self.cache.get_or_load(
            ("approvals", count_author),
            lambda: self.pull_request.list_approved_reviews_authors(count_author),
        )

    async def team_members(self, team_name: str) -> list[str]:
        return await self.cache.get_or_load(("team", team_name), lambda: self.teams.get_team_members(team_name))

    async def rank_members(self, rank: int) -> list[str]:
        fellows = self._require_fellows()
        return await self.cache.get_or_load(("rank", rank), lambda: fellows.get_team_members(str(rank)))

    async def fellows_ranks(self) -> list[tuple[str, int]]:
        fellows = self._require_fellows()
        return await self.cache.get_or_load(("fellows",), fellows.list_fellows)

    def _require_fellows(self) -> FellowsApi:
        if self.fellows is None:
            raise ConfigurationError("Fellows rules need a rank registry, but none is configured")
        return self.fellows
