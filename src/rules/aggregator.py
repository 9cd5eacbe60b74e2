"""
Report aggregator.

Merges the reports of the failing rules into the pull request verdict and works
out who should be asked for a review.
"""

from src.rules.models import ReviewerGroup
from src.rules.reports import PullRequestReport, ReviewRequest, RuleReport
from src.rules.utils import unique, without


def merge_review_requests(
    reports: list[RuleReport],
    prevent: ReviewerGroup | None = None,
    author: str | None = None,
    approvals: list[str] | None = None,
) -> ReviewRequest:
    """
    Union of the users and teams every failing rule wants to request.

    Users and teams listed in `prevent` are never requested. Neither is the pull
    request author, nor anyone who already approved.
    """
    prevent = prevent or ReviewerGroup()
    requests = [report.request_logins() for report in reports]

    users = unique(*(request.users for request in requests))
    users = without(users, [*prevent.users, *(approvals or []), *([author] if author else [])])
    teams = without(unique(*(request.teams for request in requests)), prevent.teams)
    return ReviewRequest(users=users, teams=teams)


def aggregate_reports(
    modified_files: list[str],
    reports: list[RuleReport],
    prevent: ReviewerGroup | None = None,
    author: str | None = None,
    approvals: list[str] | None = None,
) -> PullRequestReport:
    """Build the pull request report. No reports means the pull request passes."""
    return PullRequestReport(
        modified_files=modified_files,
        reports=reports,
        review_request=merge_review_requests(reports, prevent, author, approvals),
    )
