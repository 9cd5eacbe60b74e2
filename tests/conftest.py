"""
Pytest configuration: puts the project root on sys.path and provides in-memory
fakes of the collaborators the review policy engine reads from.
"""

import sys
from pathlib import Path

import pytest
import structlog

ROOT = Path(__file__).resolve().parent.parent

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.core.errors import EmptyRequirementError  # noqa: E402
from src.rules.context import ReviewContext  # noqa: E402
from src.rules.interface import FellowsApi, PullRequestApi, TeamApi  # noqa: E402
from src.rules.reports import ReviewRequest  # noqa: E402


class FakePullRequest(PullRequestApi):
    """A pull request with fixed files and approvals."""

    def __init__(self, author: str = "author", files: list[str] | None = None, approvals: list[str] | None = None):
        self.author = author
        self.files = files if files is not None else ["README.md"]
        self.approvals = approvals or []
        self.requests: list[ReviewRequest] = []
        self.calls = {"files": 0, "approvals": 0}
        self.count_author_flags: list[bool] = []

    async def list_modified_files(self) -> list[str]:
        self.calls["files"] += 1
        return self.files

    async def list_approved_reviews_authors(self, count_author: bool) -> list[str]:
        self.calls["approvals"] += 1
        self.count_author_flags.append(count_author)
        if count_author:
            return [self.author, *[login for login in self.approvals if login != self.author]]
        return self.approvals

    def get_author(self) -> str:
        return self.author

    async def request_review(self, request: ReviewRequest) -> None:
        self.requests.append(request)


class FakeTeams(TeamApi):
    """Teams from a dict. Unknown teams raise, like the GitHub adapter."""

    def __init__(self, teams: dict[str, list[str]] | None = None):
        self.teams = teams or {}
        self.calls: list[str] = []

    async def get_team_members(self, team_name: str) -> list[str]:
        self.calls.append(team_name)
        members = self.teams.get(team_name)
        if not members:
            raise EmptyRequirementError(f"Team '{team_name}' has no members")
        return members


class FakeFellows(FellowsApi):
    """Rank registry from (login, rank) pairs."""

    def __init__(self, fellows: list[tuple[str, int]] | None = None):
        self.fellows = fellows or []
        self.calls = 0

    async def list_fellows(self) -> list[tuple[str, int]]:
        self.calls += 1
        return self.fellows

    async def get_team_members(self, team_name: str) -> list[str]:
        return [login for login, rank in self.fellows if rank >= int(team_name)]


@pytest.fixture
def log():
    return structlog.get_logger("tests")


@pytest.fixture
def make_context():
    """Build a ReviewContext over fakes."""

    def _make(
        approvals: list[str] | None = None,
        teams: dict[str, list[str]] | None = None,
        author: str = "author",
        files: list[str] | None = None,
        fellows: list[tuple[str, int]] | None = None,
        score_table=None,
    ) -> ReviewContext:
        return ReviewContext(
            FakePullRequest(author=author, files=files, approvals=approvals),
            FakeTeams(teams),
            fellows=FakeFellows(fellows) if fellows is not None else None,
            score_table=score_table,
        )

    return _make
