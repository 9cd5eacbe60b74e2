import re
from enum import Enum
from typing import Annotated, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from src.core.errors import ScoreMappingError


class RuleType(str, Enum):
    """Enumerates the kinds of review rule."""

    BASIC = "basic"
    AND = "and"
    OR = "or"
    AND_DISTINCT = "and-distinct"
    FELLOWS = "fellows"


class PolicyModel(BaseModel):
    """Immutable base for everything parsed from the policy document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")


class RuleCondition(PolicyModel):
    """Regular expressions selecting the modified files that trigger a rule."""

    include: list[str]
    exclude: list[str] = Field(default_factory=list)

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _none_as_empty(cls, value: list[str] | None) -> list[str]:
        return [] if value is None else value

    @field_validator("include", "exclude")
    @classmethod
    def _patterns_compile(cls, patterns: list[str]) -> list[str]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"'{pattern}' is not a valid regular expression: {e}") from e
        return patterns


class ReviewerGroup(PolicyModel):
    """A set of users and teams, used for skip lists and request exclusions."""

    users: list[str] = Field(default_factory=list)
    teams: list[str] = Field(default_factory=list)

    @field_validator("users", "teams", mode="before")
    @classmethod
    def _none_as_empty(cls, value: list[str] | None) -> list[str]:
        return [] if value is None else value

    @property
    def is_empty(self) -> bool:
        return not self.users and not self.teams


class ReviewerRequirement(ReviewerGroup):
    """Users and teams plus the number of approvals needed from them."""

    min_approvals: int = Field(1, ge=1, validation_alias=AliasChoices("minApprovals", "min_approvals"))

    @model_validator(mode="after")
    def _has_reviewers(self) -> "ReviewerRequirement":
        if self.is_empty:
            raise ValueError("a reviewer requirement must declare 'users' or 'teams'")
        return self


class BaseRule(PolicyModel):
    """Fields shared by every rule kind."""

    name: str
    condition: RuleCondition
    count_author: bool = Field(False, validation_alias=AliasChoices("countAuthor", "count_author"))
    allowed_to_skip_rule: ReviewerGroup | None = Field(
        None, validation_alias=AliasChoices("allowedToSkipRule", "allowed_to_skip_rule")
    )


class BasicRule(BaseRule, ReviewerRequirement):
    """A single requirement: N approvals from the listed users and teams."""

    type: Literal["basic"] = "basic"

    @property
    def requirement(self) -> ReviewerRequirement:
        return ReviewerRequirement(users=self.users, teams=self.teams, min_approvals=self.min_approvals)


class MultiRequirementRule(BaseRule):
    """A rule made of two or more reviewer requirements."""

    reviewers: list[ReviewerRequirement] = Field(min_length=2)


class AndRule(MultiRequirementRule):
    """Every requirement must be fulfilled."""

    type: Literal["and"] = "and"


class OrRule(MultiRequirementRule):
    """At least one requirement must be fulfilled."""

    type: Literal["or"] = "or"


class AndDistinctRule(MultiRequirementRule):
    """Every requirement must be fulfilled, each approval counting towards one requirement only."""

    type: Literal["and-distinct"] = "and-distinct"


class FellowsRule(BaseRule):
    """N approvals from fellows of a minimum rank, optionally weighted by rank score."""

    type: Literal["fellows"] = "fellows"
    min_rank: int = Field(ge=1, validation_alias=AliasChoices("minRank", "min_rank"))
    min_approvals: int = Field(1, ge=1, validation_alias=AliasChoices("minApprovals", "min_approvals"))
    min_total_score: int | None = Field(
        None, ge=0, validation_alias=AliasChoices("minTotalScore", "min_total_score")
    )


Rule = Annotated[
    BasicRule | AndRule | OrRule | AndDistinctRule | FellowsRule,
    Field(discriminator="type"),
]


class RankScoreTable(PolicyModel):
    """Score granted by the approval of a fellow of each rank (1 to 9)."""

    dan1: int = Field(0, ge=0)
    dan2: int = Field(0, ge=0)
    dan3: int = Field(0, ge=0)
    dan4: int = Field(0, ge=0)
    dan5: int = Field(0, ge=0)
    dan6: int = Field(0, ge=0)
    dan7: int = Field(0, ge=0)
    dan8: int = Field(0, ge=0)
    dan9: int = Field(0, ge=0)

    @property
    def scores(self) -> dict[int, int]:
        return {rank: getattr(self, f"dan{rank}") for rank in range(1, 10)}

    def score_for(self, rank: int) -> int:
        scores = self.scores
        if rank not in scores:
            raise ScoreMappingError(rank)
        return scores[rank]


class ReviewPolicy(PolicyModel):
    """The parsed review policy document."""

    rules: list[Rule]
    prevent_review_requests: ReviewerGroup | None = Field(
        None, validation_alias=AliasChoices("preventReviewRequests", "prevent_review_requests")
    )
    score: RankScoreTable | None = None

    @field_validator("rules")
    @classmethod
    def _unique_names(cls, rules: list[BaseRule]) -> list[BaseRule]:
        seen: set[str] = set()
        for rule in rules:
            if rule.name in seen:
                raise ValueError(f"duplicated rule name '{rule.name}'")
            seen.add(rule.name)
        return rules
