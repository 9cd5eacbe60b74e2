"""
Reports produced by rule evaluation.

A passing rule produces no report. A failing rule produces exactly one report
explaining what is missing; the kind of report depends on why the rule failed.
"""

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from src.rules.models import RuleType


class ReviewRequest(BaseModel):
    """Users and teams whose review should be requested."""

    model_config = ConfigDict(frozen=True)

    users: list[str] = Field(default_factory=list)
    teams: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.users and not self.teams


class RuleReport(BaseModel):
    """Why a rule failed: the reviews it is missing and who could provide them."""

    model_config = ConfigDict(frozen=True)

    rule_name: str
    rule_type: RuleType
    missing_reviews: int = Field(gt=0)
    missing_users: list[str] = Field(default_factory=list)
    counting_reviews: list[str] = Field(default_factory=list)
    users_to_request: list[str] = Field(default_factory=list)
    teams_to_request: list[str] = Field(default_factory=list)

    def request_logins(self) -> ReviewRequest:
        """The users and teams whose review should be requested for this rule."""
        return ReviewRequest(users=self.users_to_request, teams=self.teams_to_request)


class MissingRankReport(RuleReport):
    """A fellows rule without enough approvals from fellows of the required rank."""

    missing_rank: int

    def request_logins(self) -> ReviewRequest:
        # Fellows are not requested individually
        return ReviewRequest()


class MissingScoreReport(RuleReport):
    """A fellows rule whose approvals do not add up to the required rank score."""

    current_score: int
    required_score: int
    # Fellows who have not approved yet, with the score their approval would add
    user_scores: dict[str, int] = Field(default_factory=dict)

    def request_logins(self) -> ReviewRequest:
        return ReviewRequest()


class PullRequestReport(BaseModel):
    """The verdict for one pull request: every failing rule and who to ask."""

    model_config = ConfigDict(frozen=True)

    modified_files: list[str] = Field(default_factory=list)
    reports: list[SerializeAsAny[RuleReport]] = Field(default_factory=list)
    review_request: ReviewRequest = Field(default_factory=ReviewRequest)

    @property
    def passed(self) -> bool:
        return not self.reports

    @property
    def conclusion(self) -> str:
        return "success" if self.passed else "failure"
