"""
Core error classes for approvalgate.

Two families live here: failures of the GitHub API (an external call that went
wrong) and structural review-policy errors (a policy that cannot be evaluated at
all). Unmet review requirements are never exceptions; they are reports.
"""

from typing import Any


class GitHubAPIError(Exception):
    """Raised when a GitHub API call does not return the expected response."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"GitHub API error {status}: {message}")


class GitHubResourceNotFoundError(GitHubAPIError):
    """Raised when a specific GitHub resource is not found."""

    def __init__(self, message: str) -> None:
        super().__init__(404, message)


class GitHubRateLimitError(GitHubAPIError):
    """Raised when GitHub API rate limit is exceeded."""

    def __init__(self, message: str) -> None:
        super().__init__(403, message)


class ReviewPolicyError(Exception):
    """Base class for errors that make a review policy impossible to evaluate."""

    pass


class ConfigurationError(ReviewPolicyError):
    """Raised when the review policy document is malformed."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class RulesFileNotFoundError(ReviewPolicyError):
    """Raised when the review policy file is not found in the repository."""

    pass


class EmptyRequirementError(ReviewPolicyError):
    """Raised when a reviewer requirement declares neither users nor teams."""

    pass


class InsufficientPoolError(ReviewPolicyError):
    """Raised when a requirement needs more approvals than it has candidates."""

    def __init__(self, required: int, available: int, source: str = "") -> None:
        self.required = required
        self.available = available
        detail = f" ({source})" if source else ""
        super().__init__(
            f"The amount of required approvals ({required}) is greater than the amount of available users ({available}){detail}."
        )


class UnknownRuleTypeError(ReviewPolicyError):
    """Raised when a rule variant has no evaluator."""

    pass


class ScoreMappingError(ReviewPolicyError):
    """Raised when a fellow's rank has no entry in the rank score table."""

    def __init__(self, rank: int) -> None:
        self.rank = rank
        super().__init__(f"Rank {rank} is out of range for the score table (expected 1 to 9)")



class RuleEvaluationError(ReviewPolicyError):
    """Raised when evaluating a rule aborts the run. Names the offending rule."""

    def __init__(self, rule_name: str, cause: Exception) -> None:
        self.rule_name = rule_name
        self.cause = cause
        super().__init__(f"Rule '{rule_name}' could not be evaluated: {cause}")
