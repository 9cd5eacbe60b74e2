"""
Contracts of the collaborators the review policy engine reads from and writes to.

The engine never talks to GitHub or a rank registry directly. It receives
implementations of these interfaces, so the same evaluation runs against the
GitHub REST API in production and against in-memory fakes in tests.
"""

from abc import ABC, abstractmethod

from src.rules.models import ReviewPolicy
from src.rules.reports import ReviewRequest


class PolicyLoader(ABC):
    """
    Abstract interface for fetching the review policy of a repository.

    This interface allows us to swap out different policy sources
    (GitHub files, local files, etc.) without changing the application logic.
    """

    @abstractmethod
    async def get_policy(self, repository: str, installation_id: int) -> ReviewPolicy:
        """
        Fetch and parse the review policy of a repository.

        Args:
            repository: The repository in format "owner/repo"
            installation_id: The GitHub App installation ID for authentication

        Returns:
            The validated ReviewPolicy
        """
        pass


class PullRequestApi(ABC):
    """Read and write access to the pull request under evaluation."""

    @abstractmethod
    async def list_modified_files(self) -> list[str]:
        """Paths of every file modified by the pull request."""
        pass

    @abstractmethod
    async def list_approved_reviews_authors(self, count_author: bool) -> list[str]:
        """Logins whose latest decisive review approves the pull request, most recent first."""
        pass

    @abstractmethod
    def get_author(self) -> str:
        """Login of the pull request author."""
        pass

    @abstractmethod
    async def request_review(self, request: ReviewRequest) -> None:
        """Ask the given users and teams to review the pull request."""
        pass


class TeamApi(ABC):
    """
    Interface for the acquisition of members of a team.

    Implementations raise when the team is unknown or has no members.
    """

    @abstractmethod
    async def get_team_members(self, team_name: str) -> list[str]:
        """Returns all the GitHub logins which belong to a given team."""
        pass


class FellowsApi(TeamApi):
    """
    A rank registry. get_team_members receives a rank as a string and returns
    every login at or above that rank.
    """

    @abstractmethod
    async def list_fellows(self) -> list[tuple[str, int]]:
        """Every known fellow as a (login, rank) pair."""
        pass


class ChecksApi(ABC):
    """Publishes the outcome of an evaluation run."""

    @abstractmethod
    async def publish_check_result(self, conclusion: str, title: str, summary: str, text: str) -> None:
        """Create or update the check run of the pull request head commit."""
        pass
